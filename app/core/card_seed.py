from app.core.enums import CardRarity
from app.schemas.card import CardCreate


def _card(
    name: str, rarity: CardRarity, cost: int, attack: int, defense: int, description: str
) -> CardCreate:
    return CardCreate(
        name=name,
        rarity=rarity,
        cost=cost,
        attack=attack,
        defense=defense,
        description=description,
    )


R = CardRarity

SAMPLE_CARDS: tuple[CardCreate, ...] = (
    _card("Patty Slapper", R.COMMON, 1, 2, 1, "A basic slap attack"),
    _card("Grease Shield", R.COMMON, 1, 1, 3, "Blocks with burger grease"),
    _card("Fry Fighter", R.COMMON, 1, 2, 2, "Crispy combat skills"),
    _card("Bun Basher", R.COMMON, 2, 3, 1, "Soft but deadly"),
    _card("Pickle Poker", R.COMMON, 1, 2, 1, "Sour strikes"),
    _card("Ketchup Kid", R.COMMON, 1, 1, 2, "Red and ready"),
    _card("Mustard Minion", R.COMMON, 1, 2, 1, "Yellow menace"),
    _card("Onion Ring Ranger", R.COMMON, 2, 2, 2, "Crispy defender"),
    _card("Lettuce Lancer", R.COMMON, 1, 1, 2, "Fresh fighter"),
    _card("Tomato Tosser", R.COMMON, 1, 2, 1, "Juicy projectiles"),
    _card("Double Patty", R.UNCOMMON, 3, 4, 3, "Twice the power"),
    _card("Cheese Champion", R.UNCOMMON, 2, 3, 3, "Melty mayhem"),
    _card("Bacon Blaster", R.UNCOMMON, 3, 5, 2, "Sizzling strikes"),
    _card("Shake Shaker", R.UNCOMMON, 2, 2, 4, "Thick defense"),
    _card("Cola Crusher", R.UNCOMMON, 3, 4, 2, "Fizzy fury"),
    _card("Napkin Ninja", R.UNCOMMON, 2, 3, 2, "Clean cuts"),
    _card("Tray Warrior", R.UNCOMMON, 3, 3, 4, "Serves justice"),
    _card("Straw Striker", R.UNCOMMON, 2, 4, 1, "Piercing attacks"),
    _card("Triple Stack", R.RARE, 4, 6, 4, "Tower of power"),
    _card("Golden Fries", R.RARE, 4, 5, 5, "Perfectly crispy"),
    _card("Secret Sauce", R.RARE, 3, 4, 5, "Mystery ingredients"),
    _card("Drive-Thru Dragon", R.RARE, 5, 7, 3, "Fast and fierce"),
    _card("Grill Master", R.RARE, 4, 5, 5, "Flame wielder"),
    _card("Ice Cream Wizard", R.RARE, 4, 4, 6, "Frozen magic"),
    _card("The Big Patty", R.LEGENDARY, 6, 8, 6, "Legendary burger boss"),
    _card("Fryer Phoenix", R.LEGENDARY, 6, 9, 5, "Rises from hot oil"),
    _card("Condiment King", R.LEGENDARY, 5, 7, 7, "Rules all sauces"),
    _card("Mega Meal", R.LEGENDARY, 7, 8, 8, "Complete combo"),
    _card("Cosmic Burger", R.MYTHICAL, 8, 10, 8, "From another dimension"),
    _card("Eternal Flame Grill", R.MYTHICAL, 7, 9, 9, "Never stops cooking"),
    _card("The Original Recipe", R.MYTHICAL, 8, 8, 10, "Ancient secrets"),
    _card("Burger Deity", R.DIVINE, 9, 11, 10, "Divine deliciousness"),
    _card("Fast Food Titan", R.DIVINE, 10, 12, 9, "Titan of taste"),
    _card("Rainbow Shake", R.PRISMATIC, 9, 10, 11, "All flavors combined"),
    _card("Holographic Menu", R.PRISMATIC, 10, 11, 11, "Every item at once"),
    _card("The Perfect Order", R.TRANSCENDENT, 12, 13, 12, "Flawless execution"),
    _card("???", R.SECRET, 15, 15, 15, "Unknown power"),
)
