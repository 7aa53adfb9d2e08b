# app/models/car.py - cars table for the local backend
from sqlalchemy import Column, Integer, String, DateTime, Text, Numeric, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
from datetime import datetime, timezone
import uuid

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_car_id() -> str:
    return str(uuid.uuid4())


class Car(Base):
    __tablename__ = "cars"

    id = Column(String(36), primary_key=True, default=new_car_id)
    make = Column(String(100), nullable=False)
    model = Column(String(200), nullable=False, default="")
    year = Column(Integer, nullable=False)
    price_per_day = Column(Numeric(10, 2), nullable=False)
    images = Column(JSON, nullable=False, default=list)
    mileage = Column(String(100), default="")
    transmission = Column(String(100), default="")
    fuel_type = Column(String(100), default="")
    description = Column(Text, default="")
    user_id = Column(String(64), index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
