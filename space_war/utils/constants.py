"""Game configuration constants."""

# Economy
STARTING_RESOURCES = 10  # Credited once, on a player's first join
FACTORY_COST = 15  # Cost to build a shipyard at an owned system

# Combat
MAX_COMBAT_ROUNDS = 50  # Hard cap so every combat terminates
DIE_SIDES = 6

# Identifier prefixes
PLAYER_ID_PREFIX = "p"  # p1, p2, ...
UNIT_ID_PREFIX = "u"
PURCHASE_ID_PREFIX = "order"
FLEET_ID_INFIX = "f"  # p1-f001
