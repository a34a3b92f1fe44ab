"""
Contract methods the marketplace relies on.

The trading contract is deployed separately; its interface must
declare these methods and events for the use cases to bind.
"""

LIST_CAR = "listCar"
BUY_CAR = "buyCar"
TRANSFER_OWNERSHIP = "transferOwnership"
GET_CAR = "getCar"
GET_CAR_COUNT = "getCarCount"

CAR_LISTED_EVENT = "CarListed"
CAR_SOLD_EVENT = "CarSold"
OWNERSHIP_TRANSFERRED_EVENT = "OwnershipTransferred"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
