# db/model.py

from sqlalchemy import Column, Date, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password = Column(Text, nullable=False)

class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    image_url = Column(String(255), nullable=False)

class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True)
    # No declared foreign key; seeded rows always reference an existing customer
    customer_id = Column(String(36), nullable=False)
    amount = Column(Integer, nullable=False)  # cents
    status = Column(String(255), nullable=False)  # paid|pending
    date = Column(Date, nullable=False)

class Revenue(Base):
    __tablename__ = "revenue"

    month = Column(String(4), primary_key=True)
    revenue = Column(Integer, nullable=False)
