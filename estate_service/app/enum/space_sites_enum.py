from enum import Enum


class ShopFloor(str, Enum):
    ground = "ground"
    first = "first"
    second = "second"
    subedari = "subedari"


class SubedariCategory(str, Enum):
    shops = "shops"
    residential = "residential"


class ShopStatus(str, Enum):
    vacant = "vacant"
    occupied = "occupied"


class OwnershipType(str, Enum):
    sole = "sole"
    common = "common"


# display / sort order for the shop register
FLOOR_ORDER = {
    ShopFloor.ground.value: 0,
    ShopFloor.first.value: 1,
    ShopFloor.second.value: 2,
    ShopFloor.subedari.value: 3,
}

SHOP_PREFIX_ORDER = {"E": 0, "M": 1, "W": 2}
