from dataclasses import dataclass
from decimal import Decimal

from app.modules.chores.models import ChoreFrequency, ChoreType


@dataclass(frozen=True)
class CatalogChore:
    Title: str
    Description: str
    Frequency: ChoreFrequency
    Type: ChoreType
    Payment: Decimal


def _Entry(title: str, description: str, frequency: ChoreFrequency, chore_type: ChoreType, payment: str) -> CatalogChore:
    return CatalogChore(
        Title=title,
        Description=description,
        Frequency=frequency,
        Type=chore_type,
        Payment=Decimal(payment),
    )


_DAILY = ChoreFrequency.Daily
_WEEKLY = ChoreFrequency.Weekly
_MONTHLY = ChoreFrequency.Monthly
_SOLO = ChoreType.Individual
_SHARED = ChoreType.FirstCome

CHORE_CATALOG: tuple[CatalogChore, ...] = (
    _Entry("Make Your Bed", "Straighten the sheets and arrange the pillows", _DAILY, _SOLO, "0.50"),
    _Entry("Brush Teeth (Morning & Night)", "Brush teeth properly twice a day", _DAILY, _SOLO, "0.25"),
    _Entry("Put Dirty Clothes in Hamper", "Every piece of dirty laundry goes in the hamper", _DAILY, _SOLO, "0.25"),
    _Entry("Tidy Your Bedroom", "Put away toys and books so the floor is clear", _DAILY, _SOLO, "0.75"),
    _Entry("Pack Your School Bag", "Get the bag ready for tomorrow", _DAILY, _SOLO, "0.50"),
    _Entry("Hang Up Your Coat", "Coat on the hook and shoes on the rack", _DAILY, _SOLO, "0.25"),
    _Entry("Feed Your Pet", "Food and fresh water for your pet", _DAILY, _SOLO, "0.75"),
    _Entry("Complete Homework", "All homework done before screen time", _DAILY, _SOLO, "1.00"),
    _Entry("Set the Table", "Plates, cutlery and napkins out for dinner", _DAILY, _SHARED, "1.00"),
    _Entry("Clear the Table", "Take the dishes away and wipe the table", _DAILY, _SHARED, "1.00"),
    _Entry("Load the Dishwasher", "Rinse and load the dirty dishes", _DAILY, _SHARED, "1.25"),
    _Entry("Unload the Dishwasher", "Put the clean dishes away", _DAILY, _SHARED, "1.25"),
    _Entry("Wipe Kitchen Counters", "Wipe down every kitchen bench", _DAILY, _SHARED, "0.75"),
    _Entry("Sweep Kitchen Floor", "Sweep up crumbs and dirt", _DAILY, _SHARED, "1.00"),
    _Entry("Take Out Kitchen Trash", "Empty the bin and put in a new bag", _DAILY, _SHARED, "0.75"),
    _Entry("Water Indoor Plants", "Water the indoor plants that need it", _DAILY, _SHARED, "0.50"),
    _Entry("Bring in the Mail", "Check the mailbox and bring the mail inside", _DAILY, _SHARED, "0.50"),
    _Entry("Tidy Living Room", "Pick up and straighten the living room", _DAILY, _SHARED, "1.00"),
    _Entry("Change Your Bed Sheets", "Strip the bed and put on fresh sheets", _WEEKLY, _SOLO, "2.00"),
    _Entry("Organize Your Closet", "Fold clothes and line up shoes", _WEEKLY, _SOLO, "2.50"),
    _Entry("Dust Your Bedroom", "Dust every surface in your room", _WEEKLY, _SOLO, "1.50"),
    _Entry("Vacuum Your Bedroom", "Vacuum the bedroom floor", _WEEKLY, _SOLO, "2.00"),
    _Entry("Vacuum Living Areas", "Vacuum the carpets in the living areas", _WEEKLY, _SHARED, "3.00"),
    _Entry("Mop Hard Floors", "Mop the kitchen, bathroom and hallway", _WEEKLY, _SHARED, "3.50"),
    _Entry("Clean Bathroom Sink", "Scrub the sink and tap", _WEEKLY, _SHARED, "2.00"),
    _Entry("Clean Toilet", "Clean the bowl and seat", _WEEKLY, _SHARED, "2.50"),
    _Entry("Take Out Recycling", "Sort the recycling and take it to the bin", _WEEKLY, _SHARED, "2.00"),
    _Entry("Clean Microwave", "Wipe the microwave inside and out", _WEEKLY, _SHARED, "2.00"),
    _Entry("Wash Family Car", "Wash and dry the car", _WEEKLY, _SHARED, "5.00"),
    _Entry("Clean Out Refrigerator", "Throw out old food and wipe the shelves", _MONTHLY, _SHARED, "4.00"),
    _Entry("Organize Garage", "Tidy and sort the garage", _MONTHLY, _SHARED, "6.00"),
    _Entry("Clean Ceiling Fans", "Dust every fan blade", _MONTHLY, _SHARED, "3.00"),
    _Entry("Mow the Lawn", "Mow the front and back yard", _MONTHLY, _SHARED, "8.00"),
    _Entry("Rake Leaves", "Rake and bag the leaves", _MONTHLY, _SHARED, "6.00"),
    _Entry("Weed Garden Beds", "Pull the weeds out of the garden beds", _MONTHLY, _SHARED, "5.00"),
)
