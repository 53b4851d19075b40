from pydantic import BaseModel
from typing import Optional, Union


class InventoryAdjustSchema(BaseModel):
    variantId: Optional[Union[str, int]] = None
    quantity: Optional[int] = None
    # "increment" or "decrement"
    action: Optional[str] = None


__all__ = ["InventoryAdjustSchema"]
