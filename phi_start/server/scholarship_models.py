# server/scholarship_models.py

from typing import List, Optional

from pydantic import BaseModel, Field

from .account_models import LocalizedList, LocalizedText


class Scholarship(BaseModel):
    id: int = Field(..., description="Unique integer within one generated list")
    title: LocalizedText
    university: str
    country: LocalizedText
    country_code: str = Field(
        ...,
        alias="countryCode",
        description="ISO 3166-1 alpha-2, e.g. 'US', 'DE'",
    )
    deadline: str = Field(..., description="YYYY-MM-DD when the model gets it right")
    level: LocalizedText
    specialty: LocalizedText
    is_open: bool = Field(..., alias="isOpen")
    is_opening_soon: bool = Field(..., alias="isOpeningSoon")
    summary: LocalizedText
    requirements: LocalizedList
    benefits: LocalizedList
    apply_link: str = Field(..., alias="applyLink")

    model_config = {"populate_by_name": True}


class CertificateDescription(BaseModel):
    short: str = Field(..., description="One-liner for a CV")
    long: str = Field(..., description="Paragraph for LinkedIn or an SOP")


class SearchParams(BaseModel):
    text: str = ""
    specialty: Optional[str] = None
    level: Optional[str] = None


# Fixed option lists of the homepage search form
SPECIALTY_OPTIONS: List[str] = [
    "STEM Fields",
    "Development-Related Fields",
    "All Fields",
    "Engineering",
    "Technology",
    "Sustainable Development",
    "Arts & Humanities",
    "Business & Economics",
    "Health",
    "Global Affairs",
    "Medicine",
]

LEVEL_OPTIONS: List[str] = [
    "Bachelors",
    "Masters",
    "PhD",
    "Masters/PhD",
    "Bachelors/Masters",
]
