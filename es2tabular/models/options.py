from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TableOptions(BaseModel):
    aggregation_name: Optional[str] = Field(default=None, alias="aggregationName")
    filter_column_name: Optional[str] = Field(default=None, alias="filterColumnName")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CsvOptions(BaseModel):
    delimiter: str = Field(default=",", min_length=1, max_length=1)
    include_headers: bool = Field(default=True, alias="includeHeaders")
    header_mode: Literal["first_row", "union"] = Field(default="first_row", alias="headerMode")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class QueryRequest(BaseModel):
    index: str = Field(min_length=1, description="Index pattern, e.g. 'logs-*'")
    query: Dict[str, Any]

    model_config = ConfigDict(extra="ignore")


class ConvertRequest(TableOptions, CsvOptions):
    filename: str = Field(min_length=1)
