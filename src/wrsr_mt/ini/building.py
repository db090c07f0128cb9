"""Keyword table of the building configuration dialect (``building.ini``)."""

from __future__ import annotations

from wrsr_mt.ini.grammar import (
    COUNT,
    FLOAT,
    IDENT,
    PATH,
    POINT,
    QUOTED,
    RECT,
    Category,
    Dialect,
    Directive,
    NodeMatch,
    choice,
)

BUILDING_TYPES = Category.of(
    "building type",
    [
        "AIRPLANE_GATE", "AIRPLANE_PARKING", "AIRPLANE_TOWER", "ATTRACTION", "BROADCAST", "CAR_DEALER",
        "CARGO_STATION", "CHURCH", "CITYHALL", "CONSTRUCTION_OFFICE", "CONSTRUCTION_OFFICE_RAIL",
        "CONTAINER_FACILITY", "COOLING_TOWER", "CUSTOMHOUSE", "DISTRIBUTION_OFFICE", "ELETRIC_EXPORT",
        "ELETRIC_IMPORT", "ENGINE", "FACTORY", "FARM", "FIELD", "FIRESTATION", "FORKLIFT_GARAGE",
        "GARBAGE_OFFICE", "GAS_STATION", "HEATING_ENDSTATION", "HEATING_PLANT", "HEATING_SWITCH", "HOSPITAL",
        "HOTEL", "KINDERGARTEN", "KINO", "LIVING", "MINE_BAUXITE", "MINE_COAL", "MINE_GRAVEL", "MINE_IRON",
        "MINE_OIL", "MINE_URANIUM", "MINE_WOOD", "MONUMENT", "PARKING", "PASSANGER_STATION",
        "PEDESTRIAN_BRIDGE", "POLICE_STATION", "POLLUTION_METER", "POWERPLANT", "PRODUCTION_LINE", "PUB",
        "RAIL_TRAFO", "RAILDEPO", "ROADDEPO", "SCHOOL", "SHIP_DOCK", "SHOP", "SPORT", "STORAGE", "SUBSTATION",
        "TRANSFORMATOR", "UNIVERSITY",
    ],
)  # fmt: skip

BUILDING_SUBTYPES = Category.of(
    "building subtype",
    [
        "AIRCUSTOM", "AIRPLANE", "CABLEWAY", "HOSTEL", "MEDICAL", "RADIO", "RAIL", "RESTAURANT", "ROAD", "SHIP",
        "SOVIET", "SPACE_FOR_VEHICLES", "TECHNICAL", "TELEVISION", "TROLLEYBUS",
    ],
)  # fmt: skip

CONNECTIONS_2P = Category.of(
    "two-point connection",
    [
        "AIRROAD", "PEDESTRIAN", "PEDESTRIAN_NOTPICK", "ROAD", "ROAD_ALLOWPASS", "ROAD_BORDER", "ROAD_INPUT",
        "ROAD_OUTPUT", "RAIL", "RAIL_ALLOWPASS", "RAIL_BORDER", "RAIL_HEIGHT", "HEATING_BIG", "HEATING_SMALL",
        "STEAM_INPUT", "STEAM_OUTPUT", "PIPE_INPUT", "PIPE_OUTPUT", "BULK_INPUT", "BULK_OUTPUT", "CABLEWAY",
        "FACTORY", "CONVEYOR_INPUT", "CONVEYOR_OUTPUT", "ELETRIC_HIGH_INPUT", "ELETRIC_HIGH_OUTPUT",
        "ELETRIC_LOW_INPUT", "ELETRIC_LOW_OUTPUT", "FENCE",
    ],
)  # fmt: skip

CONNECTIONS_1P = Category.of(
    "one-point connection",
    ["ROAD_DEAD", "PEDESTRIAN_DEAD", "WATER_DEAD", "AIRPORT_DEAD", "ADVANCED_POINT"],
)

CONNECTIONS_0P = Category.of("connection marker", ["RAIL_DEADEND"])

AIRPLANE_STATIONS = Category.of("airplane station", ["30M", "40M", "50M", "75M"])

ATTRACTION_TYPES = Category.of("attraction type", ["CARUSEL", "GALLERY", "MUSEUM", "SIGHT", "SWIM", "ZOO"])

RESOURCE_SOURCES = Category.of(
    "resource source",
    [
        "ASPHALT", "CONCRETE", "COVERED", "COVERED_ELECTRO", "GRAVEL", "OPEN", "OPEN_BOARDS", "OPEN_BRICKS",
        "OPEN_PANELS", "WORKERS",
    ],
)  # fmt: skip

STORAGE_TRANSPORTS = Category.of(
    "transport type",
    [
        "PASSANGER", "CEMENT", "COVERED", "GRAVEL", "OIL", "OPEN", "COOLER", "CONCRETE", "LIVESTOCK", "GENERAL",
        "VEHICLES", "NUCLEAR1", "NUCLEAR2",
    ],
    prefix="RESOURCE_TRANSPORT_",
)  # fmt: skip

CONSTRUCTION_PHASES = Category.of(
    "construction phase",
    [
        "ASPHALT_LAYING", "ASPHALT_ROLLING", "BOARDS_LAYING", "BRICKS_LAYING", "BRIDGE_BUILDING", "GRAVEL_LAYING",
        "GROUNDWORKS", "INTERIOR_WORKS", "PANELS_LAYING", "RAILWAY_LAYING", "ROOFTOP_BUILDING",
        "SKELETON_CASTING", "STEEL_LAYING", "TUNNELING", "WIRE_LAYING",
    ],
    prefix="SOVIET_CONSTRUCTION_",
)  # fmt: skip

_transport = choice(STORAGE_TRANSPORTS)
_phase = choice(CONSTRUCTION_PHASES)
# Resource and particle names are open-ended in the game data, so they stay plain identifiers.
_resource = IDENT
_particle = IDENT


def _flags(*keywords: str) -> list[Directive]:
    return [Directive(k) for k in keywords]


def _floats(*keywords: str) -> list[Directive]:
    return [Directive(k, (FLOAT,)) for k in keywords]


BUILDING = Dialect(
    "building",
    [
        Directive("NAME", (COUNT,)),
        Directive("NAME_STR", (QUOTED,)),
        Directive("TYPE_", fused=BUILDING_TYPES),
        Directive("SUBTYPE_", fused=BUILDING_SUBTYPES),
        *_flags(
            "HEATING_ENABLE",
            "HEATING_DISABLE",
            "CIVIL_BUILDING",
            "MONUMENT_TRESPASS",
            "CABLEWAY_HEAVY",
            "CABLEWAY_LIGHT",
            "ROAD_VEHICLE_NOT_FLIP",
            "ROAD_VEHICLE_ELECTRIC",
            "VEHICLE_CANNOT_SELECT",
            "LONG_TRAINS",
            "VEHICLE_STATION_NOT_BLOCK",
            "ATTRACTION_REMEMBER_USAGE",
            "POLLUTION_HIGH",
            "POLLUTION_MEDIUM",
            "POLLUTION_SMALL",
            "COST_WORK_BUILDING_ALL",
        ),
        # economy
        Directive("WORKERS_NEEDED", (COUNT,)),
        Directive("PROFESORS_NEEDED", (COUNT,)),
        Directive("CITIZEN_ABLE_SERVE", (COUNT,)),
        Directive("WORKING_VEHICLES_NEEDED", (COUNT,)),
        Directive("CONSUMPTION", (_resource, FLOAT)),
        Directive("CONSUMPTION_PER_SECOND", (_resource, FLOAT)),
        Directive("PRODUCTION", (_resource, FLOAT)),
        *_floats(
            "QUALITY_OF_LIVING",
            "PRODUCTION_SUN",
            "PRODUCTION_WIND",
            "SEASONAL_TEMP_MIN",
            "SEASONAL_TEMP_MAX",
            "ELE_CONSUM_WORKER_FACTOR_BASE",
            "ELE_CONSUM_WORKER_FACTOR_NIGHT",
            "ELE_CONSUM_SERVE_FACTOR_BASE",
            "ELE_CONSUM_SERVE_FACTOR_NIGHT",
            "ELE_CONSUM_CARGO_LOAD_FACTOR",
            "ELE_CONSUM_CARGO_UNLOAD_FACTOR",
            "NO_ELE_WORK_FACTOR_BASE",
            "NO_ELE_WORK_FACTOR_NIGHT",
            "NO_HEAT_WORK_FACTOR",
            "ENGINE_SPEED",
            "VEHICLE_LOADING_FACTOR",
            "VEHICLE_UNLOADING_FACTOR",
            "HELIPORT_AREA",
            "HARBOR_OVER_TERRAIN_FROM",
            "HARBOR_OVER_WATER_FROM",
            "HARBOR_EXTEND_WHEN_BULDING",
            "ATTRACTIVE_SCORE_BASE",
            "ATTRACTIVE_SCORE_ALCOHOL",
            "ATTRACTIVE_SCORE_CULTURE",
            "ATTRACTIVE_SCORE_RELIGION",
            "ATTRACTIVE_SCORE_SPORT",
            "ATTRACTIVE_FACTOR_NATURE",
            "ATTRACTIVE_FACTOR_NATURE_ADD",
            "ATTRACTIVE_FACTOR_POLLUTION",
            "ATTRACTIVE_FACTOR_POLLUTION_ADD",
            "ATTRACTIVE_FACTOR_SIGHT",
            "ATTRACTIVE_FACTOR_SIGHT_ADD",
            "ATTRACTIVE_FACTOR_WATER",
            "ATTRACTIVE_FACTOR_WATER_ADD",
            "ANIMATION_FPS",
        ),
        Directive("RESOURCE_SOURCE_", fused=RESOURCE_SOURCES),
        Directive("ATTRACTION_TYPE_", (FLOAT,), fused=ATTRACTION_TYPES),
        # storage
        Directive("STORAGE", (_transport, FLOAT)),
        Directive("STORAGE_SPECIAL", (_transport, FLOAT, _resource)),
        Directive("STORAGE_FUEL", (_transport, FLOAT)),
        Directive("STORAGE_EXPORT", (_transport, FLOAT)),
        Directive("STORAGE_IMPORT", (_transport, FLOAT)),
        Directive("STORAGE_IMPORT_CARPLANT", (_transport, FLOAT)),
        Directive("STORAGE_EXPORT_SPECIAL", (_transport, FLOAT, _resource)),
        Directive("STORAGE_IMPORT_SPECIAL", (_transport, FLOAT, _resource)),
        Directive("STORAGE_DEMAND_BASIC", (_transport, FLOAT)),
        Directive("STORAGE_DEMAND_MEDIUMADVANCED", (_transport, FLOAT)),
        Directive("STORAGE_DEMAND_ADVANCED", (_transport, FLOAT)),
        Directive("STORAGE_DEMAND_HOTEL", (_transport, FLOAT)),
        Directive("STORAGE_PACK_FROM", (COUNT,)),
        Directive("STORAGE_UNPACK_TO", (COUNT,)),
        Directive("STORAGE_LIVING_AUTO", (IDENT,), node_ref=NodeMatch.EXACT),
        # vehicle stations and parkings
        Directive("VEHICLE_STATION", (POINT, POINT)),
        Directive("VEHICLE_STATION_DETOUR_POINT", (POINT,)),
        Directive("VEHICLE_STATION_DETOUR_PID", (COUNT, POINT)),
        Directive("VEHICLE_PARKING", (POINT, POINT)),
        Directive("VEHICLE_PARKING_DETOUR_POINT", (POINT,)),
        Directive("VEHICLE_PARKING_DETOUR_PID", (COUNT, POINT)),
        Directive("VEHICLE_PARKING_PERSONAL", (POINT, POINT)),
        Directive("AIRPLANE_STATION_", (POINT, POINT), fused=AIRPLANE_STATIONS),
        Directive("HELIPORT_STATION", (POINT, POINT)),
        Directive("SHIP_STATION", (POINT, POINT)),
        # connections
        Directive("CONNECTION_", (POINT, POINT), fused=CONNECTIONS_2P),
        Directive("CONNECTION_", (POINT,), fused=CONNECTIONS_1P),
        Directive("CONNECTION_", fused=CONNECTIONS_0P),
        Directive("OFFSET_CONNECTION_XYZW", (COUNT, POINT)),
        Directive("CONNECTIONS_SPACE", (RECT,)),
        Directive("CONNECTIONS_ROAD_DEAD_SQUARE", (RECT,)),
        Directive("CONNECTIONS_AIRPORT_DEAD_SQUARE", (RECT,)),
        Directive("CONNECTIONS_WATER_DEAD_SQUARE", (FLOAT, RECT)),
        # visuals
        Directive("PARTICLE", (_particle, POINT, FLOAT, FLOAT), inline=True),
        Directive("PARTICLE_REACTOR", (POINT,)),
        Directive("PARTICLE_SNOW_REMOVE", (POINT, COUNT, FLOAT), inline=True),
        Directive("TEXT_CAPTION", (POINT, POINT)),
        Directive("WORKER_RENDERING_AREA", (POINT, POINT)),
        Directive("WORKING_SFX", (PATH,)),
        Directive("ANIMATION_MESH", (QUOTED, QUOTED)),
        Directive("UNDERGROUND_MESH", (QUOTED, QUOTED)),
        # resource points
        Directive("RESOURCE_INCREASE_POINT", (COUNT, POINT)),
        Directive("RESOURCE_INCREASE_CONV_POINT", (COUNT, POINT, POINT)),
        Directive("RESOURCE_FILLING_POINT", (POINT,)),
        Directive("RESOURCE_FILLING_CONV_POINT", (POINT, POINT)),
        # construction cost
        Directive("COST_WORK", (_phase, FLOAT)),
        Directive("COST_WORK_BUILDING_NODE", (IDENT,), node_ref=NodeMatch.EXACT),
        Directive("COST_WORK_BUILDING_KEYWORD", (IDENT,), node_ref=NodeMatch.PREFIX),
        Directive("COST_RESOURCE", (_resource, FLOAT)),
        Directive("COST_RESOURCE_AUTO", (_resource, FLOAT)),
        Directive("COST_WORK_VEHICLE_STATION", (POINT, POINT)),
        Directive("COST_WORK_VEHICLE_STATION_ACCORDING_NODE", (IDENT,), node_ref=NodeMatch.EXACT),
    ],
)
