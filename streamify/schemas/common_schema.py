import math
from typing import Optional
from pydantic import BaseModel


class Metadata(BaseModel):
    """Pagination details returned next to every listing."""
    current_page: Optional[int] = None
    page_size: Optional[int] = None
    first_page: Optional[int] = None
    last_page: Optional[int] = None
    total_records: Optional[int] = None


def calculate_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    # An empty result has empty metadata
    if total_records == 0:
        return Metadata()

    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records,
    )
