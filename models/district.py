from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base


class Region(Base):
    """
    Parent administrative area (state) of a group of districts.
    """
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(16), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    districts = relationship("District", back_populates="region")


class District(Base):
    """
    A geographic unit tracked by the service.

    Design:
    - code is the stable identifier referenced by performance records
    - name and parent are fixed after seeding
    - latitude/longitude may be absent and backfilled by a later seed
    """
    __tablename__ = "districts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(32), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False, index=True)
    parent_code = Column(String(16), ForeignKey("regions.code"), nullable=False, index=True)

    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    region = relationship("Region", back_populates="districts")

    __table_args__ = (
        Index("idx_district_parent_name", "parent_code", "name"),
    )

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
