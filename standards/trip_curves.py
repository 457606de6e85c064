from dataclasses import dataclass
from typing import Optional, Tuple

from core.components import TripCurveRecommendation
from core.derating import freeze_table
from core.models import LoadType, Standard

@dataclass(frozen=True)
class TripCharacteristic:
    key: str
    display_name: str
    inrush_tolerance: str
    applications: Tuple[str, ...]
    notes: str
    code_reference: str
    magnetic_band: Optional[Tuple[float, float]] = None  # instantaneous trip, multiples of In

# IEC 60898-1 / IEC 60947-2 instantaneous tripping characteristics
IEC_TRIP_CURVES = freeze_table({
    "B": TripCharacteristic(
        "B", "Type B (3-5× In)", "Low (3-5× In)",
        ("Residential lighting", "Heating", "General residential branch circuits"),
        "Fast magnetic response, best cable protection. Not for motor circuits.",
        "IEC 60898-1", (3.0, 5.0)),
    "C": TripCharacteristic(
        "C", "Type C (5-10× In)", "Medium (5-10× In)",
        ("Commercial and industrial circuits", "Lighting with small motors", "Distribution boards"),
        "General-purpose curve for moderate inrush.",
        "IEC 60898-1", (5.0, 10.0)),
    "D": TripCharacteristic(
        "D", "Type D (10-20× In)", "High (10-20× In)",
        ("Motors", "Transformer primaries", "Welding equipment"),
        "Rides through motor starting currents of 6-10× rated.",
        "IEC 60898-1", (10.0, 20.0)),
    "K": TripCharacteristic(
        "K", "Type K (8-12× In)", "Medium-high (8-12× In)",
        ("Heavy industrial motors", "Mining and offshore"),
        "Industrial curve, check availability before specifying.",
        "IEC 60947-2", (8.0, 12.0)),
    "Z": TripCharacteristic(
        "Z", "Type Z (2-3× In)", "Very low (2-3× In)",
        ("Semiconductor protection", "Control circuits", "Sensitive electronics"),
        "Trips on minimal inrush. Not for motors or transformers.",
        "IEC 60947-2", (2.0, 3.0)),
})

# UL 489 trip mechanisms
NEC_TRIP_TYPES = freeze_table({
    "thermal-magnetic": TripCharacteristic(
        "thermal-magnetic", "Thermal-Magnetic (Standard)", "Medium (comparable to IEC Type C)",
        ("Residential circuits", "Commercial branch circuits", "Panelboards"),
        "Bimetal overload element with fixed magnetic short-circuit element.",
        "UL 489 / NEC 240"),
    "electronic": TripCharacteristic(
        "electronic", "Electronic Trip (Programmable)", "Adjustable",
        ("Selective coordination", "Critical industrial feeders", "Monitored systems"),
        "Adjustable long-time, short-time, instantaneous and ground-fault settings.",
        "UL 489 / NEC 240.87"),
    "adjustable-magnetic": TripCharacteristic(
        "adjustable-magnetic", "Adjustable Magnetic Trip", "High (adjustable, typically 5-15× In)",
        ("Motor branch circuits", "Transformer primaries", "Industrial feeders"),
        "Instantaneous pickup can be set above motor locked-rotor inrush.",
        "UL 489 / NEC 430.52"),
})

# (standard, load character) -> (curve or mechanism, rationale)
TRIP_DECISION_TABLE = freeze_table({
    (Standard.IEC, LoadType.RESISTIVE): (
        "B", "Resistive loads draw almost no inrush, so Type B gives the fastest overload clearing."),
    (Standard.IEC, LoadType.INDUCTIVE): (
        "D", "Motors and transformers start at 6-10× rated current. Type D tolerates up to 20× "
             "without nuisance tripping and still clears faults."),
    (Standard.IEC, LoadType.MIXED): (
        "C", "Type C tolerates the moderate inrush of small motors and still protects the resistive part of the load."),
    (Standard.IEC, LoadType.CAPACITIVE): (
        "C", "Capacitor charging produces a short inrush that Type C rides through. Consider Type Z for sensitive electronics."),
    (Standard.NEC, LoadType.RESISTIVE): (
        "thermal-magnetic", "A standard thermal-magnetic breaker covers resistive loads, which have negligible inrush."),
    (Standard.NEC, LoadType.INDUCTIVE): (
        "adjustable-magnetic", "Set the magnetic pickup above motor locked-rotor current to avoid nuisance trips on starting (NEC 430.52)."),
    (Standard.NEC, LoadType.MIXED): (
        "thermal-magnetic", "Thermal-magnetic breakers handle the moderate inrush of mixed loads."),
    (Standard.NEC, LoadType.CAPACITIVE): (
        "thermal-magnetic", "Capacitor charging inrush is brief. Consider an electronic trip unit for large banks."),
})

def get_trip_characteristic(standard: Standard, key: str) -> TripCharacteristic:
    catalogue = IEC_TRIP_CURVES if standard == Standard.IEC else NEC_TRIP_TYPES
    return catalogue[key]

def recommend_trip_curve(load_type: LoadType, standard: Standard) -> TripCurveRecommendation:
    key, rationale = TRIP_DECISION_TABLE[(standard, load_type)]
    characteristic = get_trip_characteristic(standard, key)
    return TripCurveRecommendation(
        standard=standard,
        load_type=load_type,
        recommendation=key,
        display_name=characteristic.display_name,
        inrush_tolerance=characteristic.inrush_tolerance,
        rationale=rationale,
        applications=characteristic.applications,
        code_reference=characteristic.code_reference,
    )
