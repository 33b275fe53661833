import os
import random
import sys

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from config import settings
from database import SessionLocal, init_db
from models.category import Category
from models.product import Product
from models.users import User
from utils.hashing import get_password_hash

# Configuration
DEFAULT_PASSWORD = "12345678"
PRODUCT_COUNT = 100

# Tokens carry str(role); only role 1 may edit the catalog
USERS = [
    {"fullname": "Admin User", "username": "admin", "email": "admin@example.com", "tel": "1234567890", "role": 0},
    {"fullname": "Normal User", "username": "user", "email": "user@example.com", "tel": "0987654321", "role": 1},
    {"fullname": "Manager User", "username": "manager", "email": "manager@example.com", "tel": "1122334455", "role": 2},
]

CATEGORIES = [
    "Mobile", "Tablet", "Smart Watch", "Laptop", "Desktop",
    "Camera", "Headphones", "Speakers", "Accessories", "Gaming",
]
# End Configuration


def seed(session) -> None:
    """Insert demo users, categories and products into an empty database."""
    if session.query(User).first():
        print("Baza zawiera już dane, pomijam seedowanie.")
        return

    users = [User(password_hash=get_password_hash(DEFAULT_PASSWORD), **u) for u in USERS]
    categories = [Category(name=name, status=True) for name in CATEGORIES]
    session.add_all(users + categories)
    session.flush()

    for i in range(1, PRODUCT_COUNT + 1):
        session.add(Product(
            name=f"Product {i}",
            slug=f"product-{i}",
            description=f"Description for Product {i}",
            price=random.randint(1000, 100000) / 100,
            image=settings.NO_IMAGE,
            user_id=random.choice(users).id,
            category_id=random.choice(categories).id,
        ))

    session.commit()
    print(f"Dodano {len(users)} użytkowników, {len(categories)} kategorii i {PRODUCT_COUNT} produktów.")


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        seed(session)
    finally:
        session.close()
