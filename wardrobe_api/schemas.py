from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field("", alias="imageUrl", description="Storage URL of the garment photo")
    user_id: str = Field("", alias="userId", description="Owner of the image")


class GarmentAnalysis(BaseModel):
    model_config = ConfigDict(extra="ignore")

    category: str
    colors: List[str]
    brand: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.category) and len(self.colors) > 0

    @property
    def primary_color(self) -> Optional[str]:
        return self.colors[0] if self.colors else None

    @property
    def colors_display(self) -> str:
        if not self.colors:
            return "Unknown"
        return ", ".join(c.title() for c in self.colors)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class AnalyzeResponse(BaseModel):
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
