"""
Seed catalog loaded into an empty products collection at startup
"""

from typing import List

from app.core.logger import logger
from app.repositories.product import ProductRepository
from app.schemas.product import ProductCreate

SEED_PRODUCTS = [
    # Electronics
    ("Gaming Laptop Pro", "High-performance gaming laptop with RTX 4080", 1299.99, 15, "Electronics", "TECH-LAPTOP-001"),
    ("Wireless Gaming Mouse", "Ergonomic wireless gaming mouse with RGB", 49.99, 50, "Electronics", "TECH-MOUSE-001"),
    ("Mechanical Keyboard", "RGB mechanical keyboard with Cherry MX switches", 129.99, 30, "Electronics", "TECH-KEYBOARD-001"),
    ("4K Webcam", "Ultra HD webcam for streaming and video calls", 89.99, 25, "Electronics", "TECH-WEBCAM-001"),
    ("Wireless Headphones", "Noise-cancelling bluetooth headphones", 199.99, 40, "Electronics", "TECH-HEADPHONES-001"),
    # Books
    ("Microservices Architecture", "Complete guide to microservices design patterns", 39.99, 100, "Books", "BOOK-TECH-001"),
    ("FastAPI in Action", "Comprehensive FastAPI development guide", 44.99, 75, "Books", "BOOK-TECH-002"),
    ("Clean Code", "A handbook of agile software craftsmanship", 34.99, 80, "Books", "BOOK-TECH-003"),
    # Home & Garden
    ("Smart Coffee Maker", "WiFi-enabled programmable coffee maker", 149.99, 20, "Home & Garden", "HOME-COFFEE-001"),
    ("LED Desk Lamp", "Adjustable LED desk lamp with USB charging", 29.99, 60, "Home & Garden", "HOME-LAMP-001"),
    # Sports & Outdoors
    ("Yoga Mat Premium", "Eco-friendly premium yoga mat with carry strap", 24.99, 45, "Sports & Outdoors", "SPORT-YOGA-001"),
    ("Water Bottle Insulated", "Stainless steel insulated water bottle 32oz", 19.99, 70, "Sports & Outdoors", "SPORT-BOTTLE-001"),
    # Clothing
    ("Cotton T-Shirt", "Premium cotton crew neck t-shirt", 14.99, 100, "Clothing", "CLOTH-TSHIRT-001"),
    ("Denim Jeans", "Classic fit denim jeans", 59.99, 35, "Clothing", "CLOTH-JEANS-001"),
    ("Hoodie Pullover", "Comfortable cotton blend hoodie", 39.99, 55, "Clothing", "CLOTH-HOODIE-001"),
]


def seed_products() -> List[ProductCreate]:
    """The seed catalog as create requests"""
    return [
        ProductCreate(
            name=name,
            description=description,
            price=price,
            stock_quantity=stock_quantity,
            category=category,
            sku=sku,
            image_url=f"https://images.example.com/products/{sku.lower()}.jpg",
        )
        for name, description, price, stock_quantity, category, sku in SEED_PRODUCTS
    ]


async def load_seed_data(repository: ProductRepository) -> int:
    """Insert the seed catalog when the collection is empty; returns the number inserted"""
    if await repository.count() > 0:
        logger.debug("Products already present, skipping seed data")
        return 0

    products = seed_products()
    for product in products:
        await repository.create(product)

    categories = sorted({product.category for product in products})
    logger.info(
        f"Created {len(products)} products across {len(categories)} categories",
        metadata={"event": "seed_data_loaded", "categories": categories}
    )
    return len(products)
