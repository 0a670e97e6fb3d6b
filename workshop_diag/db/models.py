import os
import uuid

from dotenv import load_dotenv
from sqlalchemy import JSON, Boolean, Column, DateTime, Numeric, String, Text, create_engine, func
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data.db")

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class CommonProblem(Base):
    __tablename__ = "common_problems"
    id = Column(String, primary_key=True, default=_new_id)
    name = Column(String, nullable=False, unique=True, index=True)
    category = Column(String, nullable=False, index=True)
    severity = Column(String, nullable=False)
    estimated_cost = Column(Numeric(10, 2, asdecimal=False))
    description = Column(Text)
    symptoms = Column(JSON, nullable=False, default=list)
    solutions = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


def get_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    Base.metadata.create_all(bind=bind or engine)
