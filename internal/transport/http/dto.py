"""
Data Transfer Objects for Catalog Search API.

Contains Pydantic models for request/response validation.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# Aggregation DTOs
class AggregationValueDTO(BaseModel):
    """Count of documents for one filter value."""

    id: str = Field(..., description="Filter value id")
    label: str = Field(..., description="Display label")
    count: int = Field(..., description="Number of matching documents")


class AggregationDTO(BaseModel):
    """Facet counts for one filter."""

    key: str = Field(..., description="Filter key")
    kind: str = Field(..., description="Filter kind (attribute, range, price_range)")
    values: List[AggregationValueDTO] = Field(default_factory=list, description="Value counts")

    class Config:
        json_schema_extra = {
            "example": {
                "key": "Color",
                "kind": "attribute",
                "values": [{"id": "red", "label": "Red", "count": 12}],
            }
        }


# Search DTOs
class SearchResultResponse(BaseModel):
    """Catalog search response."""

    products: List[Dict[str, Any]] = Field(default_factory=list, description="Indexed products")
    total_count: int = Field(..., description="Total number of matching products")
    aggregations: List[AggregationDTO] = Field(default_factory=list, description="Facets")

    class Config:
        json_schema_extra = {
            "example": {
                "products": [{"id": "p-1", "name": "Espresso machine"}],
                "total_count": 1,
                "aggregations": [],
            }
        }


# Filter property DTOs
class FilterPropertyDTO(BaseModel):
    """Catalog property offered as a store filter."""

    name: str = Field(..., min_length=1, description="Property name")
    is_selected: bool = Field(False, description="Whether the property is a filter")

    class Config:
        json_schema_extra = {"example": {"name": "Color", "is_selected": True}}


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str
    request_id: Optional[str] = None
