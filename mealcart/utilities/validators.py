"""
Request body schemas for the parsing endpoints, using Pydantic.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogAwareRequest(BaseModel):
    """Common fields: the household's ingredient catalog and custom store list."""
    model_config = ConfigDict(populate_by_name=True)

    ingredient_catalog: Dict[str, Any] = Field(default_factory=dict, alias="ingredientCatalog")
    stores: Optional[List[str]] = None

    @field_validator('ingredient_catalog', mode='before')
    @classmethod
    def catalog_or_empty(cls, v):
        """A missing or non-object catalog means no catalog."""
        return v if isinstance(v, dict) else {}

    @field_validator('stores', mode='before')
    @classmethod
    def clean_stores(cls, v):
        if not isinstance(v, list):
            return None
        return [str(s).strip() for s in v if s is not None and str(s).strip()]


class IngredientParseRequest(CatalogAwareRequest):
    """Schema for POST /api/ingredients/parse."""
    text: Union[str, List[str]] = ""

    @field_validator('text', mode='before')
    @classmethod
    def text_or_empty(cls, v):
        if v is None:
            return ""
        if isinstance(v, list):
            return [str(line) for line in v if line is not None]
        return str(v)


class ImportParseRequest(CatalogAwareRequest):
    """Schema for POST /api/import/parse."""
    url: str = ""

    @field_validator('url', mode='before')
    @classmethod
    def strip_url(cls, v):
        """Remove leading/trailing whitespace."""
        return str(v or "").strip()
