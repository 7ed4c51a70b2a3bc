"""
Pydantic schemas for colleges and API requests and responses.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from models import CollegeTypeEnum

# College Schemas
class ContactDetails(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None

class FeeEntry(BaseModel):
    course: str
    amount: str

class College(BaseModel):
    name: str
    address: str
    contact_details: ContactDetails = Field(default_factory=ContactDetails, alias="contactDetails")
    courses_available: List[str] = Field(alias="coursesAvailable")
    fees: List[FeeEntry]
    type: CollegeTypeEnum = CollegeTypeEnum.BOTH

    class Config:
        populate_by_name = True

# Search Schemas
class SearchRequest(BaseModel):
    location: str

class SearchStateResponse(BaseModel):
    location: str = ""
    colleges: List[College] = []
    total_count: int = 0
    display_count: int = 0
    has_more: bool = False
    loading: bool = False
    error: str = ""

class PrefetchResponse(BaseModel):
    status: str = "scheduled"
    location: str

# Locations Schema
class LocationsResponse(BaseModel):
    states: List[str] = []
    cities: List[str] = []

# Debug Schema
class DebugResponse(BaseModel):
    api_key_status: str  # Configured | Missing
    api_key: str
    environment: str
    troubleshooting: List[str] = []

# Error Schema
class ErrorResponse(BaseModel):
    error: str
    message: str
