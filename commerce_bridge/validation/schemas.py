"""
Request models for every tool operation.

Requests are validated as explicit structures: identifiers at the top
level, query filters under "params" and write payloads under "data".
Payload models come in pairs: "<Resource>Fields" with every field optional
for partial updates, and "New<Resource>" marking what a create requires.
"""
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import Field, StrictInt, StrictStr

from commerce_bridge.validation.base import (
    Amount,
    CountryCode,
    CurrencyCode,
    Date,
    Email,
    Flag,
    Id,
    NonEmptyText,
    NonNegativeInt,
    PositiveInt,
    Price,
    RequestModel,
    Slug,
    SortOrder,
    Text,
    Url,
)

ProductStatus = Literal["draft", "pending", "private", "publish"]
StockStatus = Literal["instock", "outofstock", "onbackorder"]
OrderStatus = Literal[
    "pending", "processing", "on-hold", "completed",
    "cancelled", "refunded", "failed", "trash",
]
PostStatus = Literal["publish", "future", "draft", "pending", "private"]
WebhookTopic = Literal[
    "product.created", "product.updated", "product.deleted", "product.restored",
    "order.created", "order.updated", "order.deleted", "order.restored",
    "customer.created", "customer.updated", "customer.deleted",
    "coupon.created", "coupon.updated", "coupon.deleted", "coupon.restored",
]

IdList = List[Id]
RequiredIdList = Annotated[List[Id], Field(min_length=1)]
PerPage = Annotated[StrictInt, Field(ge=1, le=100)]
Summary = Annotated[StrictStr, Field(max_length=320)]


# Shared structures

class IdRequest(RequestModel):
    id: Id


class DeleteRequest(RequestModel):
    id: Id
    force: Optional[Flag] = None


class ListParams(RequestModel):
    """Paging and search filters accepted by every list endpoint."""
    page: Optional[PositiveInt] = None
    per_page: Optional[PerPage] = None
    search: Optional[Text] = None
    order: Optional[SortOrder] = None
    orderby: Optional[Text] = None


class ListRequest(RequestModel):
    params: Optional[ListParams] = None


class MetaEntry(RequestModel):
    key: NonEmptyText
    value: Any = None


class TermReference(RequestModel):
    id: Id


class Address(RequestModel):
    first_name: Optional[Text] = None
    last_name: Optional[Text] = None
    company: Optional[Text] = None
    address_1: Optional[Text] = None
    address_2: Optional[Text] = None
    city: Optional[Text] = None
    state: Optional[Text] = None
    postcode: Optional[Text] = None
    country: Optional[CountryCode] = None
    email: Optional[Email] = None
    phone: Optional[Text] = None


# Products

class ProductImage(RequestModel):
    id: Optional[Id] = None
    src: Optional[Url] = None
    alt: Optional[Text] = None


class ProductFields(RequestModel):
    name: Optional[NonEmptyText] = None
    type: Optional[Literal["simple", "grouped", "external", "variable"]] = None
    status: Optional[ProductStatus] = None
    featured: Optional[Flag] = None
    catalog_visibility: Optional[Literal["visible", "catalog", "search", "hidden"]] = None
    description: Optional[Text] = None
    short_description: Optional[Text] = None
    sku: Optional[Text] = None
    regular_price: Optional[Price] = None
    sale_price: Optional[Price] = None
    virtual: Optional[Flag] = None
    downloadable: Optional[Flag] = None
    manage_stock: Optional[Flag] = None
    stock_quantity: Optional[StrictInt] = None
    stock_status: Optional[StockStatus] = None
    categories: Optional[List[TermReference]] = None
    tags: Optional[List[TermReference]] = None
    images: Optional[List[ProductImage]] = None
    meta_data: Optional[List[MetaEntry]] = None


class NewProduct(ProductFields):
    name: NonEmptyText


class ProductUpdate(ProductFields):
    id: Id


class ListProductsParams(ListParams):
    category: Optional[Id] = None
    tag: Optional[Id] = None
    status: Optional[Literal[ProductStatus, "any"]] = None
    featured: Optional[Flag] = None
    sku: Optional[Text] = None
    on_sale: Optional[Flag] = None
    stock_status: Optional[StockStatus] = None


class ListProductsRequest(RequestModel):
    params: Optional[ListProductsParams] = None


class CreateProductRequest(RequestModel):
    data: NewProduct


class UpdateProductRequest(RequestModel):
    id: Id
    data: ProductFields


class ProductBatch(RequestModel):
    create: Optional[List[NewProduct]] = None
    update: Optional[List[ProductUpdate]] = None
    delete: Optional[IdList] = None


class BatchProductsRequest(RequestModel):
    data: ProductBatch


# Variations

class VariationAttribute(RequestModel):
    id: Optional[Id] = None
    name: Optional[Text] = None
    option: Text


class ImageReference(RequestModel):
    id: Optional[Id] = None


class VariationFields(RequestModel):
    description: Optional[Text] = None
    sku: Optional[Text] = None
    regular_price: Optional[Price] = None
    sale_price: Optional[Price] = None
    status: Optional[ProductStatus] = None
    manage_stock: Optional[Flag] = None
    stock_quantity: Optional[StrictInt] = None
    stock_status: Optional[StockStatus] = None
    attributes: Optional[List[VariationAttribute]] = None
    image: Optional[ImageReference] = None
    meta_data: Optional[List[MetaEntry]] = None


class ListVariationsRequest(ListRequest):
    product_id: Id


class GetVariationRequest(RequestModel):
    product_id: Id
    id: Id


class CreateVariationRequest(RequestModel):
    product_id: Id
    data: VariationFields


class UpdateVariationRequest(RequestModel):
    product_id: Id
    id: Id
    data: VariationFields


class DeleteVariationRequest(DeleteRequest):
    product_id: Id


# Categories and tags

class CategoryImage(RequestModel):
    id: Optional[Id] = None
    src: Optional[Url] = None


class CategoryFields(RequestModel):
    name: Optional[NonEmptyText] = None
    slug: Optional[Slug] = None
    parent: Optional[NonNegativeInt] = None
    description: Optional[Text] = None
    display: Optional[Literal["default", "products", "subcategories", "both"]] = None
    image: Optional[CategoryImage] = None
    menu_order: Optional[StrictInt] = None


class NewCategory(CategoryFields):
    name: NonEmptyText


class ListCategoriesParams(ListParams):
    parent: Optional[NonNegativeInt] = None
    hide_empty: Optional[Flag] = None
    product: Optional[Id] = None


class ListCategoriesRequest(RequestModel):
    params: Optional[ListCategoriesParams] = None


class CreateCategoryRequest(RequestModel):
    data: NewCategory


class UpdateCategoryRequest(RequestModel):
    id: Id
    data: CategoryFields


class TagFields(RequestModel):
    name: Optional[NonEmptyText] = None
    slug: Optional[Slug] = None
    description: Optional[Text] = None


class NewTag(TagFields):
    name: NonEmptyText


class ListTagsParams(ListParams):
    hide_empty: Optional[Flag] = None
    product: Optional[Id] = None


class ListTagsRequest(RequestModel):
    params: Optional[ListTagsParams] = None


class CreateTagRequest(RequestModel):
    data: NewTag


class UpdateTagRequest(RequestModel):
    id: Id
    data: TagFields


class ProductsByTermRequest(ListRequest):
    id: Id


class AssignTermsRequest(RequestModel):
    product_id: Id
    term_ids: RequiredIdList
    append: Optional[Flag] = None


# Attributes

class AttributeFields(RequestModel):
    name: Optional[NonEmptyText] = None
    slug: Optional[Slug] = None
    type: Optional[Literal["select"]] = None
    order_by: Optional[Literal["menu_order", "name", "name_num", "id"]] = None
    has_archives: Optional[Flag] = None


class NewAttribute(AttributeFields):
    name: NonEmptyText


class CreateAttributeRequest(RequestModel):
    data: NewAttribute


class UpdateAttributeRequest(RequestModel):
    id: Id
    data: AttributeFields


class TermFields(RequestModel):
    name: Optional[NonEmptyText] = None
    slug: Optional[Slug] = None
    description: Optional[Text] = None
    menu_order: Optional[StrictInt] = None


class NewTerm(TermFields):
    name: NonEmptyText


class ListTermsRequest(ListRequest):
    attribute_id: Id


class GetTermRequest(RequestModel):
    attribute_id: Id
    id: Id


class CreateTermRequest(RequestModel):
    attribute_id: Id
    data: NewTerm


class UpdateTermRequest(RequestModel):
    attribute_id: Id
    id: Id
    data: TermFields


class DeleteTermRequest(DeleteRequest):
    attribute_id: Id


# Orders

class LineItem(RequestModel):
    product_id: Id
    quantity: PositiveInt
    variation_id: Optional[NonNegativeInt] = None


class ShippingLine(RequestModel):
    method_id: Text
    method_title: Optional[Text] = None
    total: Optional[Price] = None


class OrderFields(RequestModel):
    status: Optional[OrderStatus] = None
    currency: Optional[CurrencyCode] = None
    customer_id: Optional[NonNegativeInt] = None
    customer_note: Optional[Text] = None
    payment_method: Optional[Text] = None
    payment_method_title: Optional[Text] = None
    set_paid: Optional[Flag] = None
    billing: Optional[Address] = None
    shipping: Optional[Address] = None
    line_items: Optional[List[LineItem]] = None
    shipping_lines: Optional[List[ShippingLine]] = None
    meta_data: Optional[List[MetaEntry]] = None


class ListOrdersParams(ListParams):
    status: Optional[Literal[OrderStatus, "any"]] = None
    customer: Optional[Id] = None
    product: Optional[Id] = None
    after: Optional[Text] = None
    before: Optional[Text] = None


class ListOrdersRequest(RequestModel):
    params: Optional[ListOrdersParams] = None


class CreateOrderRequest(RequestModel):
    data: OrderFields


class UpdateOrderRequest(RequestModel):
    id: Id
    data: OrderFields


class UpdateOrderStatusRequest(RequestModel):
    id: Id
    status: OrderStatus


class ListOrderNotesRequest(RequestModel):
    order_id: Id
    type: Optional[Literal["any", "customer", "internal"]] = None


class OrderNote(RequestModel):
    note: NonEmptyText
    customer_note: Optional[Flag] = None


class CreateOrderNoteRequest(RequestModel):
    order_id: Id
    data: OrderNote


class DeleteOrderNoteRequest(DeleteRequest):
    order_id: Id


class ListOrderRefundsRequest(ListRequest):
    order_id: Id


class RefundLineItem(RequestModel):
    id: Id
    quantity: Optional[PositiveInt] = None
    refund_total: Optional[Amount] = None


class Refund(RequestModel):
    amount: Price
    reason: Optional[Text] = None
    refunded_by: Optional[Id] = None
    api_refund: Optional[Flag] = None
    line_items: Optional[List[RefundLineItem]] = None


class CreateOrderRefundRequest(RequestModel):
    order_id: Id
    data: Refund


class DeleteOrderRefundRequest(DeleteRequest):
    order_id: Id


# Customers

class CustomerFields(RequestModel):
    email: Optional[Email] = None
    first_name: Optional[Text] = None
    last_name: Optional[Text] = None
    username: Optional[Text] = None
    password: Optional[Annotated[StrictStr, Field(min_length=6)]] = None
    billing: Optional[Address] = None
    shipping: Optional[Address] = None
    meta_data: Optional[List[MetaEntry]] = None


class NewCustomer(CustomerFields):
    email: Email


class ListCustomersParams(ListParams):
    email: Optional[Email] = None
    role: Optional[Text] = None


class ListCustomersRequest(RequestModel):
    params: Optional[ListCustomersParams] = None


class CreateCustomerRequest(RequestModel):
    data: NewCustomer


class UpdateCustomerRequest(RequestModel):
    id: Id
    data: CustomerFields


class DeleteCustomerRequest(DeleteRequest):
    reassign: Optional[Id] = None


class CustomerOrdersParams(ListParams):
    status: Optional[Literal[OrderStatus, "any"]] = None


class CustomerOrdersRequest(RequestModel):
    id: Id
    params: Optional[CustomerOrdersParams] = None


class FindCustomerByEmailRequest(RequestModel):
    email: Email


class UpdateCustomerMetadataRequest(RequestModel):
    id: Id
    meta_data: Annotated[List[MetaEntry], Field(min_length=1)]


# Coupons

class CouponFields(RequestModel):
    code: Optional[NonEmptyText] = None
    discount_type: Optional[Literal["percent", "fixed_cart", "fixed_product"]] = None
    amount: Optional[Price] = None
    description: Optional[Text] = None
    date_expires: Optional[Text] = None
    individual_use: Optional[Flag] = None
    product_ids: Optional[IdList] = None
    excluded_product_ids: Optional[IdList] = None
    usage_limit: Optional[NonNegativeInt] = None
    usage_limit_per_user: Optional[NonNegativeInt] = None
    free_shipping: Optional[Flag] = None
    minimum_amount: Optional[Price] = None
    maximum_amount: Optional[Price] = None
    email_restrictions: Optional[List[Email]] = None


class NewCoupon(CouponFields):
    code: NonEmptyText


class ListCouponsParams(ListParams):
    code: Optional[Text] = None


class ListCouponsRequest(RequestModel):
    params: Optional[ListCouponsParams] = None


class CreateCouponRequest(RequestModel):
    data: NewCoupon


class UpdateCouponRequest(RequestModel):
    id: Id
    data: CouponFields


# Settings

class SettingsGroupRequest(RequestModel):
    group: Slug


class GetSettingRequest(SettingsGroupRequest):
    id: Slug


class UpdateSettingRequest(GetSettingRequest):
    value: Any


class SettingUpdate(RequestModel):
    id: NonEmptyText
    value: Any


class BatchUpdateSettingsRequest(SettingsGroupRequest):
    updates: Annotated[List[SettingUpdate], Field(min_length=1)]


# Reports

class ReportPeriodRequest(RequestModel):
    period: Optional[Literal["week", "month", "last_month", "year"]] = None
    date_min: Optional[Date] = None
    date_max: Optional[Date] = None


class RevenueByDateRequest(RequestModel):
    date_min: Date
    date_max: Date


# Webhooks

class WebhookFields(RequestModel):
    name: Optional[NonEmptyText] = None
    topic: Optional[WebhookTopic] = None
    delivery_url: Optional[Url] = None
    secret: Optional[NonEmptyText] = None
    status: Optional[Literal["active", "paused", "disabled"]] = None


class NewWebhook(WebhookFields):
    topic: WebhookTopic
    delivery_url: Url


class ListWebhooksParams(ListParams):
    status: Optional[Literal["all", "active", "paused", "disabled"]] = None


class ListWebhooksRequest(RequestModel):
    params: Optional[ListWebhooksParams] = None


class CreateWebhookRequest(RequestModel):
    data: NewWebhook


class UpdateWebhookRequest(RequestModel):
    id: Id
    data: WebhookFields


class SetupWebhooksRequest(RequestModel):
    base_url: Url


# Content

class ContentFields(RequestModel):
    title: Optional[NonEmptyText] = None
    content: Optional[Text] = None
    excerpt: Optional[Text] = None
    slug: Optional[Slug] = None
    status: Optional[PostStatus] = None
    author: Optional[Id] = None
    featured_media: Optional[NonNegativeInt] = None
    meta: Optional[Dict[str, Any]] = None


class PostFields(ContentFields):
    categories: Optional[IdList] = None
    tags: Optional[IdList] = None


class NewPost(PostFields):
    title: NonEmptyText


class PageFields(ContentFields):
    parent: Optional[NonNegativeInt] = None
    menu_order: Optional[StrictInt] = None


class NewPage(PageFields):
    title: NonEmptyText


class ListPostsParams(ListParams):
    status: Optional[Literal[PostStatus, "any"]] = None
    categories: Optional[IdList] = None
    tags: Optional[IdList] = None
    author: Optional[Id] = None


class ListPostsRequest(RequestModel):
    params: Optional[ListPostsParams] = None


class CreatePostRequest(RequestModel):
    data: NewPost


class UpdatePostRequest(RequestModel):
    id: Id
    data: PostFields


class ListPagesParams(ListParams):
    status: Optional[Literal[PostStatus, "any"]] = None
    parent: Optional[NonNegativeInt] = None


class ListPagesRequest(RequestModel):
    params: Optional[ListPagesParams] = None


class CreatePageRequest(RequestModel):
    data: NewPage


class UpdatePageRequest(RequestModel):
    id: Id
    data: PageFields


class ListTermsWpParams(ListParams):
    hide_empty: Optional[Flag] = None


class ListTermsWpRequest(RequestModel):
    params: Optional[ListTermsWpParams] = None


class NewPostCategory(NewTag):
    parent: Optional[NonNegativeInt] = None


class CreatePostCategoryRequest(RequestModel):
    data: NewPostCategory


class ListCommentsParams(ListParams):
    post: Optional[Id] = None
    status: Optional[Literal["approve", "hold", "spam", "trash"]] = None


class ListCommentsRequest(RequestModel):
    params: Optional[ListCommentsParams] = None


# Media

class MediaFields(RequestModel):
    title: Optional[Text] = None
    alt_text: Optional[Text] = None
    caption: Optional[Text] = None
    description: Optional[Text] = None
    post: Optional[Id] = None


class ListMediaParams(ListParams):
    media_type: Optional[Literal["image", "video", "text", "application", "audio"]] = None
    mime_type: Optional[Text] = None
    parent: Optional[Id] = None


class ListMediaRequest(RequestModel):
    params: Optional[ListMediaParams] = None


class UploadMediaRequest(RequestModel):
    filename: Annotated[StrictStr, Field(pattern=r"^[^/\\]+\.[A-Za-z0-9]+$")]
    content_base64: NonEmptyText
    mime_type: Annotated[StrictStr, Field(pattern=r"^[\w.+-]+/[\w.+-]+$")]
    data: Optional[MediaFields] = None


class UpdateMediaRequest(RequestModel):
    id: Id
    data: MediaFields


class AssignMediaToProductRequest(RequestModel):
    product_id: Id
    media_ids: RequiredIdList
    append: Optional[Flag] = None


# SEO

class SeoPostRequest(RequestModel):
    post_id: Id


class YoastMeta(RequestModel):
    title: Optional[Text] = None
    meta_description: Optional[Summary] = None
    focus_keyword: Optional[Text] = None
    canonical: Optional[Url] = None


class YoastMetaRequest(SeoPostRequest):
    data: YoastMeta


class RankmathMeta(RequestModel):
    title: Optional[Text] = None
    description: Optional[Summary] = None
    focus_keyword: Optional[Text] = None
    secondary_keywords: Optional[List[Text]] = None
    canonical_url: Optional[Url] = None


class RankmathMetaRequest(SeoPostRequest):
    data: RankmathMeta


class ListRedirectsParams(ListParams):
    status: Optional[Literal["active", "inactive", "trashed"]] = None


class ListRedirectsRequest(RequestModel):
    params: Optional[ListRedirectsParams] = None


class NewRedirect(RequestModel):
    url_from: NonEmptyText
    url_to: NonEmptyText
    header_code: Optional[Literal[301, 302, 307, 410, 451]] = None
    status: Optional[Literal["active", "inactive"]] = None


class CreateRedirectRequest(RequestModel):
    data: NewRedirect


class AnalyzeUrlRequest(RequestModel):
    url: Url
