"""
Pydantic schemas for structured LLM output validation
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_INDUSTRY = "Unknown"
UNKNOWN_COMPANY = "Unknown company"


class CompanyProfile(BaseModel):
    """
    Qualitative company information returned by the AI lookup.

    Immutable once produced. A profile built after a failed lookup carries
    the failure message in `error`.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Microsoft Corporation",
                "symbol": "MSFT",
                "overview": "Microsoft develops and licenses software, services and devices...",
                "history": "Founded in 1975 by Bill Gates and Paul Allen...",
                "products": "Windows, Office 365, Azure, Xbox, LinkedIn",
                "isPublic": True,
                "industry": "Software",
            }
        },
    )

    name: str = Field(..., min_length=1, description="Full company name")
    symbol: Optional[str] = Field(None, description="Stock ticker if public, otherwise null")
    industry: str = Field(UNKNOWN_INDUSTRY, description="Primary industry")
    is_public: bool = Field(False, alias="isPublic", description="Listed on a stock exchange")
    overview: str = Field("", description="2-3 sentence business description")
    history: str = Field("", description="2-3 sentence founding and key milestones")
    products: str = Field("", description="Key products and services description")
    error: Optional[str] = Field(None, description="Lookup failure message (degraded profile only)")

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, value: Any) -> Optional[str]:
        """Blank and 'null'-like symbols mean private."""
        if value is None:
            return None
        text = str(value).strip().upper()
        if text in ("", "NULL", "NONE", "N/A", "PRIVATE"):
            return None
        return text

    @field_validator("industry", "overview", "history", "products", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info) -> Any:
        if value is None:
            return UNKNOWN_INDUSTRY if info.field_name == "industry" else ""
        return value

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the original camelCase keys."""
        return self.model_dump(by_alias=True)
