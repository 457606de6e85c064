from core.components import Cable
from core.derating import freeze_table
from core.models import ConductorMaterial, ConductorSize, InstallationMethod, SizeUnit

# IEC 60898-1 (up to 125 A) / IEC 60947-2 (frames above) preferred rated currents
BREAKER_RATINGS = (
    6, 10, 13, 16, 20, 25, 32, 40, 50, 63, 80, 100, 125, 160, 200, 250, 315,
    400, 500, 630, 800, 1000, 1250, 1600, 2000, 2500, 3200, 4000,
)

# Typical rated short-circuit breaking capacity (Icn / Icu) per frame size
# Format: (Max_Frame_Amps, kA)
INTERRUPTING_RATINGS = (
    (125, 10.0),   # MCB, IEC 60898-1
    (250, 25.0),   # MCCB, IEC 60947-2
    (630, 36.0),
    (1600, 50.0),
    (4000, 65.0),  # ACB
)

# IEC 60364-5-52 Table B.52.14 - Correction factors for ambient air temperatures other than 30°C
# Format: {Insulation_Temp: ((Ambient_C, Factor), ...)} interpolated between points
TEMP_CORRECTION_FACTORS = freeze_table({
    70: (  # PVC
        (10, 1.22), (15, 1.17), (20, 1.12), (25, 1.06), (30, 1.00),
        (35, 0.94), (40, 0.87), (45, 0.79), (50, 0.71), (55, 0.61),
        (60, 0.50), (65, 0.35), (70, 0.00),
    ),
    90: (  # XLPE / EPR
        (10, 1.15), (15, 1.12), (20, 1.08), (25, 1.04), (30, 1.00),
        (35, 0.96), (40, 0.91), (45, 0.87), (50, 0.82), (55, 0.76),
        (60, 0.71), (65, 0.65), (70, 0.58), (75, 0.50), (80, 0.41),
    ),
})

# IEC 60364-5-52 Table B.52.17 - Reduction factors for groups of more than one circuit
# Format: {Arrangement: ((Circuits, Factor), ...)} interpolated between points
GROUPING_FACTORS = freeze_table({
    "A": ((1, 1.00), (2, 0.80), (3, 0.70), (4, 0.65), (5, 0.60), (6, 0.57),
          (7, 0.54), (8, 0.52), (9, 0.50), (12, 0.45), (16, 0.41), (20, 0.38)),
    "B": ((1, 1.00), (2, 0.85), (3, 0.79), (4, 0.75), (5, 0.73), (6, 0.72),
          (7, 0.70), (8, 0.70), (9, 0.70), (12, 0.65), (16, 0.60), (20, 0.57)),
    "C": ((1, 1.00), (2, 0.85), (3, 0.79), (4, 0.75), (5, 0.73), (6, 0.72),
          (7, 0.70), (8, 0.70), (9, 0.70), (12, 0.65), (16, 0.60), (20, 0.57)),
    "E": ((1, 1.00), (2, 0.88), (3, 0.82), (4, 0.77), (5, 0.75), (6, 0.73),
          (7, 0.73), (8, 0.72), (9, 0.72), (12, 0.70), (16, 0.68), (20, 0.66)),
})

# Grouping arrangement per reference installation method; B when no method is given
GROUPING_ARRANGEMENT = freeze_table({
    InstallationMethod.A1: "A",
    InstallationMethod.A2: "A",
    InstallationMethod.B1: "B",
    InstallationMethod.B2: "B",
    InstallationMethod.C: "C",
    InstallationMethod.D: "C",
    InstallationMethod.E: "E",
    InstallationMethod.F: "E",
    InstallationMethod.G: "E",
})
DEFAULT_GROUPING_ARRANGEMENT = "B"

# Installation method factor relative to reference method B1
# (Tables B.52.2 / B.52.4, 2.5 mm² copper PVC ratios, capped at 1.00)
INSTALLATION_METHOD_FACTORS = freeze_table({
    InstallationMethod.A1: 0.81,
    InstallationMethod.A2: 0.77,
    InstallationMethod.B1: 1.00,
    InstallationMethod.B2: 0.96,
    InstallationMethod.C: 1.00,
    InstallationMethod.D: 0.92,
    InstallationMethod.E: 1.00,
    InstallationMethod.F: 1.00,
    InstallationMethod.G: 1.00,
})

# IEC 60364-5-52 Table B.52.4/B.52.5 - Current-carrying capacity (A)
# Format: {Size_mm2: {Insulation_Temp: Amps}}
IEC_B52_COPPER = freeze_table({
    "1.5": {70: 17.5, 90: 22},
    "2.5": {70: 23, 90: 30},
    "4":   {70: 31, 90: 40},
    "6":   {70: 40, 90: 51},
    "10":  {70: 54, 90: 70},
    "16":  {70: 68, 90: 94},
    "25":  {70: 89, 90: 119},
    "35":  {70: 110, 90: 148},
    "50":  {70: 133, 90: 180},
    "70":  {70: 168, 90: 232},
    "95":  {70: 201, 90: 282},
    "120": {70: 232, 90: 328},
    "150": {70: 258, 90: 374},
    "185": {70: 289, 90: 424},
    "240": {70: 341, 90: 500},
    "300": {70: 384, 90: 561},
    "400": {70: 430, 90: 656},
    "500": {70: 490, 90: 749},
    "630": {70: 560, 90: 855},
})

IEC_B52_ALUMINUM = freeze_table({
    "2.5": {70: 18, 90: 23},
    "4":   {70: 24, 90: 31},
    "6":   {70: 31, 90: 40},
    "10":  {70: 42, 90: 54},
    "16":  {70: 53, 90: 73},
    "25":  {70: 69, 90: 92},
    "35":  {70: 86, 90: 115},
    "50":  {70: 104, 90: 140},
    "70":  {70: 131, 90: 180},
    "95":  {70: 157, 90: 219},
    "120": {70: 181, 90: 254},
    "150": {70: 201, 90: 290},
    "185": {70: 225, 90: 329},
    "240": {70: 266, 90: 388},
    "300": {70: 300, 90: 435},
    "400": {70: 335, 90: 510},
    "500": {70: 382, 90: 582},
})

# IEC 60228 - Conductor resistance (Ohm/km)
IEC_60228_COPPER = freeze_table({
    "1.5": 12.1, "2.5": 7.41, "4": 4.61, "6": 3.08, "10": 1.83, "16": 1.15,
    "25": 0.727, "35": 0.524, "50": 0.387, "70": 0.268, "95": 0.193,
    "120": 0.153, "150": 0.124, "185": 0.0991, "240": 0.0754, "300": 0.0601,
    "400": 0.0470, "500": 0.0366, "630": 0.0283,
})

IEC_60228_ALUMINUM = freeze_table({
    "2.5": 12.1, "4": 7.54, "6": 5.03, "10": 3.00, "16": 1.88, "25": 1.19,
    "35": 0.858, "50": 0.633, "70": 0.439, "95": 0.316, "120": 0.250,
    "150": 0.203, "185": 0.162, "240": 0.123, "300": 0.0986, "400": 0.0770,
    "500": 0.0600,
})

def _build_conductors(ampacities, resistances, material: ConductorMaterial):
    return tuple(
        Cable(
            size=ConductorSize(size, SizeUnit.MM2),
            material=material,
            ampacities=tuple(sorted(columns.items())),
            resistance=resistances[size],
        )
        for size, columns in ampacities.items()
    )

# Ascending by cross-section, Ohm/km
CONDUCTORS = freeze_table({
    ConductorMaterial.COPPER: _build_conductors(IEC_B52_COPPER, IEC_60228_COPPER, ConductorMaterial.COPPER),
    ConductorMaterial.ALUMINUM: _build_conductors(IEC_B52_ALUMINUM, IEC_60228_ALUMINUM, ConductorMaterial.ALUMINUM),
})
