from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class CheckoutOrder(Base):
    __tablename__ = "checkout_orders"

    id = Column(Integer, primary_key=True)
    stripe_session_id = Column(String, unique=True, nullable=False)
    item_count = Column(Integer, default=0)
    line_items = Column(Text, nullable=False)  # JSON payload sent to Stripe
    status = Column(String, default="pending")  # pending, paid
    created_at = Column(DateTime(timezone=True), server_default=func.now())
