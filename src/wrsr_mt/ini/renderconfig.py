"""Render manifest dialect (``renderconfig.ini``): where a building's assets live."""

from __future__ import annotations

from wrsr_mt.ini.grammar import FLOAT, PATH, Dialect, Directive

MODEL = "MODEL"
MODEL_LOD = "MODEL_LOD"
MODEL_LOD2 = "MODEL_LOD2"
MODEL_EMISSIVE = "MODELEMISSIVE"
MATERIAL = "MATERIAL"
MATERIAL_EMISSIVE = "MATERIALEMISSIVE"

MODEL_KEYWORDS = (MODEL, MODEL_LOD, MODEL_LOD2, MODEL_EMISSIVE)
MATERIAL_KEYWORDS = (MATERIAL, MATERIAL_EMISSIVE)

RENDER = Dialect(
    "render",
    [
        Directive(MODEL, (PATH,)),
        Directive(MODEL_LOD, (PATH, FLOAT)),
        Directive(MODEL_LOD2, (PATH, FLOAT)),
        Directive(MODEL_EMISSIVE, (PATH,)),
        Directive(MATERIAL, (PATH,)),
        Directive(MATERIAL_EMISSIVE, (PATH,)),
    ],
)
