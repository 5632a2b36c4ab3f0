from app.models.profile import Profile
from app.models.purchase import Purchase
from app.models.gift_list import GiftList
from app.models.list_item import ListItem

__all__ = [
    "Profile",
    "Purchase",
    "GiftList",
    "ListItem",
]
