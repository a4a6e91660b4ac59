from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import get_settings

SQLALCHEMY_DATABASE_URL = get_settings().database_url

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    # Import models here to create tables
    from app import models  # noqa: F401
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed(db, with_admin=get_settings().seed_admin)
    finally:
        db.close()

def seed(db, with_admin=False):
    """Seed the catalog if empty; the demo admin only when asked for."""
    from app.models import User, RoomType, SpaService, RestaurantMenu
    if with_admin and not db.query(User).filter_by(username="admin").first():
        db.add(User(username="admin", full_name="Resort Admin", email="admin@luxuryresort.com", role="admin"))
    if not db.query(RoomType).first():
        db.add_all([
            RoomType(
                name="Deluxe Room",
                description="Elegant and spacious room featuring premium amenities, a luxury bathroom, and breathtaking city views.",
                price=299, capacity=2, size=45,
                amenities=["Wi-Fi", "TV", "24-hour service"],
            ),
            RoomType(
                name="Executive Suite",
                description="Luxurious suite with separate living area, premium furnishings, and exclusive access to the Executive Lounge.",
                price=499, capacity=3, size=75,
                amenities=["Wi-Fi", "TV", "24-hour service", "Mini Bar"],
            ),
            RoomType(
                name="Ocean View Suite",
                description="Premier suite featuring panoramic ocean views, luxury amenities, and a private balcony perfect for sunset watching.",
                price=699, capacity=4, size=90,
                amenities=["Wi-Fi", "TV", "24-hour service", "Mini Bar", "Balcony"],
            ),
        ])
    if not db.query(SpaService).first():
        db.add_all([
            SpaService(
                name="Swedish Massage",
                description="A classic relaxation massage using long, flowing strokes to reduce tension and improve circulation.",
                duration=60, price=120,
            ),
            SpaService(
                name="Luxury Facial",
                description="Premium skincare products and expert techniques to cleanse, exfoliate, and nourish your skin.",
                duration=75, price=150,
            ),
            SpaService(
                name="Hot Stone Therapy",
                description="Smooth, heated basalt stones melt away tension while skilled hands massage tired muscles.",
                duration=90, price=180,
            ),
        ])
    if not db.query(RestaurantMenu).first():
        db.add_all([
            RestaurantMenu(
                name="Signature Menu",
                description="A curated tasting experience featuring our chef's most celebrated creations, paired with fine wines.",
                price=120,
            ),
            RestaurantMenu(
                name="Seafood Collection",
                description="Fresh, sustainable seafood prepared with innovative techniques and seasonal ingredients.",
                price=95,
            ),
            RestaurantMenu(
                name="Vegetarian Journey",
                description="A creative exploration of plant-based cuisine.",
                price=85,
            ),
        ])
    db.commit()
