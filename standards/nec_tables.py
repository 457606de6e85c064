from core.components import Cable
from core.derating import freeze_table
from core.models import ConductorMaterial, ConductorSize, SizeUnit

# NEC 240.6(A) - Standard Ampere Ratings for Fuses and Inverse Time Circuit Breakers
BREAKER_RATINGS = (
    15, 20, 25, 30, 35, 40, 45, 50, 60, 70, 80, 90, 100, 110, 125, 150, 175,
    200, 225, 250, 300, 350, 400, 450, 500, 600, 700, 800, 1000, 1200, 1600,
    2000, 2500, 3000, 4000,
)

# Typical UL 489 interrupting ratings per molded/insulated case frame (NEC 110.9)
# Format: (Max_Frame_Amps, kA)
INTERRUPTING_RATINGS = (
    (100, 10.0),
    (250, 25.0),
    (1200, 35.0),
    (4000, 65.0),
)

# NEC Table 310.15(B)(1) - Ambient Temperature Correction Factors
# Based on 30°C base ambient. No uprating credit is taken below 30°C.
# Format: {Temp_Range_Tuple: {Insulation_Rating: Factor}}
TEMP_CORRECTION_FACTORS = freeze_table({
    (-40, 30): {60: 1.00, 75: 1.00, 90: 1.00},
    (31, 35): {60: 0.91, 75: 0.94, 90: 0.96},
    (36, 40): {60: 0.82, 75: 0.88, 90: 0.91},
    (41, 45): {60: 0.71, 75: 0.82, 90: 0.87},
    (46, 50): {60: 0.58, 75: 0.75, 90: 0.82},
    (51, 55): {60: 0.41, 75: 0.67, 90: 0.76},
    (56, 60): {60: 0.00, 75: 0.58, 90: 0.71},
    (61, 65): {60: 0.00, 75: 0.47, 90: 0.65},
    (66, 70): {60: 0.00, 75: 0.33, 90: 0.58},
    (71, 75): {60: 0.00, 75: 0.00, 90: 0.50},
    (76, 80): {60: 0.00, 75: 0.00, 90: 0.41},
    (81, 85): {60: 0.00, 75: 0.00, 90: 0.29},
    (86, 90): {60: 0.00, 75: 0.00, 90: 0.00},
})

# NEC Table 310.15(C)(1) - Adjustment Factors for More Than Three Current-Carrying Conductors
# Format: {Max_Conductors: Factor}
GROUPING_FACTORS = freeze_table({
    3: 1.0,
    6: 0.80,   # 4-6 conductors
    9: 0.70,   # 7-9
    20: 0.50,  # 10-20
    30: 0.45,  # 21-30
    40: 0.40,  # 31-40
    100: 0.35  # 41+
})

# NEC Table 310.16 - Allowable Ampacities of Insulated Conductors
# Format: {SizeAWG: {TempRating: Amps}}
NEC_310_16_COPPER = freeze_table({
    "14": {60: 15, 75: 20, 90: 25},
    "12": {60: 20, 75: 25, 90: 30},
    "10": {60: 30, 75: 35, 90: 40},
    "8":  {60: 40, 75: 50, 90: 55},
    "6":  {60: 55, 75: 65, 90: 75},
    "4":  {60: 70, 75: 85, 90: 95},
    "3":  {60: 85, 75: 100, 90: 115},
    "2":  {60: 95, 75: 115, 90: 130},
    "1":  {60: 110, 75: 130, 90: 145},
    "1/0": {60: 125, 75: 150, 90: 170},
    "2/0": {60: 145, 75: 175, 90: 195},
    "3/0": {60: 165, 75: 200, 90: 225},
    "4/0": {60: 195, 75: 230, 90: 260},
    "250": {60: 215, 75: 255, 90: 290},
    "300": {60: 240, 75: 285, 90: 320},
    "350": {60: 260, 75: 310, 90: 350},
    "400": {60: 280, 75: 335, 90: 380},
    "500": {60: 320, 75: 380, 90: 430},
    "600": {60: 350, 75: 420, 90: 475},
    "700": {60: 385, 75: 460, 90: 520},
    "750": {60: 400, 75: 475, 90: 535},
    "800": {60: 410, 75: 490, 90: 555},
    "900": {60: 435, 75: 520, 90: 585},
    "1000": {60: 455, 75: 545, 90: 615},
    "1250": {60: 495, 75: 590, 90: 665},
    "1500": {60: 525, 75: 625, 90: 705},
    "1750": {60: 545, 75: 650, 90: 735},
    "2000": {60: 555, 75: 665, 90: 750},
})

NEC_310_16_ALUMINUM = freeze_table({
    "12": {60: 15, 75: 20, 90: 25},
    "10": {60: 25, 75: 30, 90: 35},
    "8":  {60: 35, 75: 40, 90: 45},
    "6":  {60: 40, 75: 50, 90: 55},
    "4":  {60: 55, 75: 65, 90: 75},
    "3":  {60: 65, 75: 75, 90: 85},
    "2":  {60: 75, 75: 90, 90: 100},
    "1":  {60: 85, 75: 100, 90: 115},
    "1/0": {60: 100, 75: 120, 90: 135},
    "2/0": {60: 115, 75: 135, 90: 150},
    "3/0": {60: 130, 75: 155, 90: 175},
    "4/0": {60: 150, 75: 180, 90: 205},
    "250": {60: 170, 75: 205, 90: 230},
    "300": {60: 190, 75: 230, 90: 255},
    "350": {60: 210, 75: 250, 90: 280},
    "400": {60: 225, 75: 270, 90: 305},
    "500": {60: 260, 75: 310, 90: 350},
    "600": {60: 285, 75: 340, 90: 385},
    "750": {60: 315, 75: 385, 90: 435},
    "1000": {60: 375, 75: 445, 90: 500},
})

# NEC Chapter 9, Table 8 - DC Resistance at 75°C (Ohms per 1000 ft, uncoated copper)
CHAPTER_9_TABLE_8_COPPER = freeze_table({
    "14": 3.14, "12": 1.98, "10": 1.24, "8": 0.778, "6": 0.491, "4": 0.308,
    "3": 0.245, "2": 0.194, "1": 0.154, "1/0": 0.122, "2/0": 0.0967,
    "3/0": 0.0766, "4/0": 0.0608, "250": 0.0515, "300": 0.0429, "350": 0.0367,
    "400": 0.0321, "500": 0.0258, "600": 0.0214, "700": 0.0184, "750": 0.0171,
    "800": 0.0161, "900": 0.0143, "1000": 0.0129, "1250": 0.0103,
    "1500": 0.00858, "1750": 0.00735, "2000": 0.00643,
})

CHAPTER_9_TABLE_8_ALUMINUM = freeze_table({
    "12": 3.25, "10": 2.04, "8": 1.28, "6": 0.808, "4": 0.508, "3": 0.403,
    "2": 0.319, "1": 0.253, "1/0": 0.201, "2/0": 0.159, "3/0": 0.126,
    "4/0": 0.100, "250": 0.0847, "300": 0.0707, "350": 0.0605, "400": 0.0529,
    "500": 0.0424, "600": 0.0353, "750": 0.0282, "1000": 0.0212,
})

def _size_unit(size: str) -> SizeUnit:
    # 250 and above are kcmil; "1/0".."4/0" and gauges below are AWG
    if size.isdigit() and int(size) >= 250:
        return SizeUnit.KCMIL
    return SizeUnit.AWG

def _build_conductors(ampacities, resistances, material: ConductorMaterial):
    return tuple(
        Cable(
            size=ConductorSize(size, _size_unit(size)),
            material=material,
            ampacities=tuple(sorted(columns.items())),
            resistance=resistances[size],
        )
        for size, columns in ampacities.items()
    )

# Ascending by size, Ohm per 1000 ft
CONDUCTORS = freeze_table({
    ConductorMaterial.COPPER: _build_conductors(NEC_310_16_COPPER, CHAPTER_9_TABLE_8_COPPER, ConductorMaterial.COPPER),
    ConductorMaterial.ALUMINUM: _build_conductors(NEC_310_16_ALUMINUM, CHAPTER_9_TABLE_8_ALUMINUM, ConductorMaterial.ALUMINUM),
})
