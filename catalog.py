from decimal import Decimal, InvalidOperation

from cart import LineItem

# Product catalog, keyed by the product ids used on the product pages
PRODUCTS = {
    "cotswolds-gins-tasting-gift": {
        "name": "Craft Gins of the Cotswolds Tasting Gift Set",
        "price": Decimal("52.00"),
        "priceId": "price_1SLSSSDLWuae7NssXA2c2K50",
        "image": "https://codeandcapture.github.io/images/products/cotswolds-gin-gift-alt1.jpg",
    },
    "london-gins-tasting-gift": {
        "name": "London Gin Tasting Set",
        "price": Decimal("52.00"),
        "priceId": "price_1SLSUCDLWuae7NssKYS4Jx7b",
        "image": "https://codeandcapture.github.io/images/products/london-gins.jpg",
    },
    "devon-gins-tasting-gift": {
        "name": "Devon Gins Tasting Set",
        "price": Decimal("52.00"),
        "priceId": "price_1SLSd6DLWuae7NssLsJuYrMT",
        "image": "/images/products/devon-gin-tasting.jpg",
    },
    "yorkshire-gin-gift-set": {
        "name": "Yorkshire Gin Gift Set",
        "price": Decimal("52.00"),
        "priceId": "price_1SLSX1DLWuae7NssYC9gC2aT",
        "image": "/images/products/yorkshire-gin-tasting-set.jpg",
    },
    "regions-of-scotland-whisky-tasting-set": {
        "name": "Regions of Scotland Whisky Tasting Gift Set",
        "price": Decimal("58.00"),
        "priceId": "price_1SLSdlDLWuae7Nss8iCw26SW",
        "image": "/images/products/regions-of-scotland-gift.jpg",
    },
    "six-styles-scotch-whisky-tasting-set": {
        "name": "Six Styles of Scotch Tasting Gift Set",
        "price": Decimal("63.00"),
        "priceId": "price_1SLSeHDLWuae7Nss2SEy0Fmy",
        "image": "/images/products/six-styles-scotch-main.jpg",
    },
    "founders-selection-whisky-gift-set": {
        "name": "Founders Selection Whisky Gift Set",
        "price": Decimal("55.00"),
        "priceId": "price_1SLSZ8DLWuae7NssGHl64wqJ",
        "image": "/images/products/founders-selection.jpg",
    },
    "luxury-single-malt-whisky": {
        "name": "Luxury Single Malt Whisky Tasting Gift Set",
        "price": Decimal("110.00"),
        "priceId": "price_1SLSbYDLWuae7NssO2HhSFVk",
        "image": "/images/products/luxury-single-malt.jpg",
    },
    "south-west-gin-tasting-set": {
        "name": "South West Craft Gin Tasting Gift Set",
        "price": Decimal("50.00"),
        "priceId": "price_1SQA7EDLWuae7NssnnHeOJSQ",
        "image": "/images/products/devon-gins.jpg",
    },
    "six-styles-sharing-box": {
        "name": "Six Styles of Scotch Whisky Sharing Box",
        "price": Decimal("135.00"),
        "priceId": "price_1SP3AjDLWuae7Nssc66stjRA",
        "image": "/images/products/six-styles-of-scotch-whisky-sharing.png",
    },
    "limited-edition-single-malt-sharing": {
        "name": "The Founders Selection Whisky Sharing Box",
        "price": Decimal("115.00"),
        "priceId": "price_1SQb16DLWuae7Nss4HRygByM",
        "image": "/images/products/scotch-whisky-tasting-box.JPG",
    },
    "south-west-gin-sharing-box": {
        "name": "South West Craft Gin Sharing Box",
        "price": Decimal("100.00"),
        "priceId": "price_1SQn3qDLWuae7NssJ2V53SfR",
        "image": "/images/products/south-west-specialist-sharing.png",
    },
    "british-gins-sharing-box": {
        "name": "British Gins Sharing Box",
        "price": Decimal("95.00"),
        "priceId": "price_1SQoDmDLWuae7NssHmWPO8a4",
        "image": "/images/products/gin-tasting-at-home-experience.jpeg",
    },
    "cotswolds-gins-sharing-box": {
        "name": "Cotswolds Gins Sharing Box",
        "price": Decimal("100.00"),
        "priceId": "price_1SQoODDLWuae7Nss7y2OGzs1",
        "image": "/images/products/cotswolds-gins-tasting-sharing.JPG",
    },
    "luxury-whisky-christmas-crackers": {
        "name": "Luxury Whisky Christmas Crackers",
        "price": Decimal("58.00"),
        "priceId": "price_1SLSiIDLWuae7NssttgxBG5i",
        "image": "/images/products/christmas-crackers-whisky-alt1.jpg",
    },
    "london-gin-christmas-crackers": {
        "name": "London Gin Christmas Crackers",
        "price": Decimal("52.00"),
        "priceId": "price_1SMYUCDLWuae7Nss0MtD8DfQ",
        "image": "/images/products/london-gins-christmas-crackers-alt1.jpg",
    },
}


class ProductNotFoundError(LookupError):
    """Raised when a product cannot be sold because it has no Stripe price."""

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__("Product not found in cart system. Please contact support.")


def add_product(cart, product_id, name=None, price=None, image=None, price_ref=None, quantity=1):
    """
    Add a product to ``cart``, filling omitted fields from PRODUCTS.

    Refuses (ProductNotFoundError) rather than adding an item that could not
    be checked out.
    """
    product = PRODUCTS.get(product_id, {})
    price_ref = price_ref or product.get("priceId")
    name = name or product.get("name")
    price = price if price is not None else product.get("price")

    if not price_ref or not name or price is None:
        raise ProductNotFoundError(product_id)

    try:
        price = Decimal(str(price))
    except InvalidOperation:
        raise ValueError(f"Invalid price {price!r} for {product_id}")
    if not price.is_finite() or price < 0:
        raise ValueError(f"Invalid price {price!r} for {product_id}")

    item = LineItem(
        id=product_id,
        name=name,
        price=price,
        image=image or product.get("image", ""),
        price_ref=price_ref,
    )
    return cart.add(item, quantity)
