"""
Ability ids used in orders.

Only the abilities the core needs to reason about are listed:
generic unit commands plus every creation ability referenced
by the unit type catalog. Any other ability id still flows through
the batcher untouched as a plain int.
"""

from enum import IntEnum


class AbilityId(IntEnum):
    """Engine ability ids."""
    SMART = 1

    # Generic commands
    STOP = 3665
    HARVEST_GATHER = 3666
    HARVEST_RETURN = 3667
    ATTACK = 3674
    MOVE = 3794

    # Terran
    CALLDOWNMULE_CALLDOWNMULE = 171
    TERRANBUILD_COMMANDCENTER = 318
    TERRANBUILD_SUPPLYDEPOT = 319
    TERRANBUILD_REFINERY = 320
    TERRANBUILD_BARRACKS = 321
    TERRANBUILD_ENGINEERINGBAY = 322
    TERRANBUILD_MISSILETURRET = 323
    TERRANBUILD_BUNKER = 324
    TERRANBUILD_FACTORY = 328
    TERRANBUILD_STARPORT = 329
    COMMANDCENTERTRAIN_SCV = 524
    BARRACKSTRAIN_MARINE = 560
    BARRACKSTRAIN_MARAUDER = 563
    UPGRADETOPLANETARYFORTRESS_PLANETARYFORTRESS = 1450
    UPGRADETOORBITAL_ORBITALCOMMAND = 1516

    # Protoss
    PROTOSSBUILD_NEXUS = 880
    PROTOSSBUILD_PYLON = 881
    PROTOSSBUILD_ASSIMILATOR = 882
    PROTOSSBUILD_GATEWAY = 883
    PROTOSSBUILD_FORGE = 884
    PROTOSSBUILD_CYBERNETICSCORE = 894
    GATEWAYTRAIN_ZEALOT = 916
    GATEWAYTRAIN_STALKER = 917
    NEXUSTRAIN_PROBE = 1006

    # Zerg
    ZERGBUILD_HATCHERY = 1152
    ZERGBUILD_EXTRACTOR = 1154
    ZERGBUILD_SPAWNINGPOOL = 1155
    UPGRADETOLAIR_LAIR = 1216
    UPGRADETOHIVE_HIVE = 1218
    LARVATRAIN_DRONE = 1342
    LARVATRAIN_ZERGLING = 1343
    LARVATRAIN_OVERLORD = 1344
    TRAINQUEEN_QUEEN = 1632
