"""
Configuration: GIS indicator registry, emission factors, model constants,
trend thresholds and reference data.

GIS_INDICATORS maps each composite-index indicator to its normalisation
domain, invert flag and weight. The domains are shared by every call site.
"""

# ---------------------------------------------------------------------------
# Service identity
# ---------------------------------------------------------------------------
OPERATOR_NAME = "Tratolixo"
DEFAULT_SEED = 42

# ---------------------------------------------------------------------------
# Dataset window
# ---------------------------------------------------------------------------
FIRST_MONTH = "2025-02-01"
N_MONTHS = 12

# ---------------------------------------------------------------------------
# GIS composite index registry
# ---------------------------------------------------------------------------
# domain: (min, max) raw range, values are clipped before rescaling
# invert: True where a lower raw value is better
# weight: contribution to the 0-100 score (weights sum to 1.0)
GIS_INDICATORS: dict[str, dict] = {
    "kg_per_capita_year": {
        "component": "x1",
        "domain": (5.0, 80.0),
        "invert": False,
        "weight": 0.25,
    },
    "quality_pct": {
        "component": "x2",
        "domain": (60.0, 100.0),
        "invert": False,
        "weight": 0.30,
    },
    "alerts_per_ton": {
        "component": "x3",
        "domain": (0.0, 10.0),
        "invert": True,
        "weight": 0.15,
    },
    "co2_avoided_per_ton": {
        "component": "x4",
        "domain": (0.0, 0.80),
        "invert": False,
        "weight": 0.15,
    },
    "bags_per_capita_month": {
        "component": "x5",
        "domain": (0.0, 4.0),
        "invert": False,
        "weight": 0.15,
    },
}

# Lower bound (inclusive) of each classification bucket, best first
GIS_CLASSIFICATION_BANDS: list[tuple[float, str]] = [
    (80.0, "excelente"),
    (65.0, "bom"),
    (50.0, "satisfatorio"),
    (35.0, "insuficiente"),
]
GIS_FLOOR_CLASSIFICATION = "critico"

# ---------------------------------------------------------------------------
# Emission factors (tCO2e per ton)
# ---------------------------------------------------------------------------
EF_LANDFILL = 0.900
EF_ANAEROBIC_DIGESTION = 0.100
EF_OPERATIONS = 0.030
EF_REJECTED = 0.500

EMISSION_FACTORS = [
    ("EF-REF", "landfill", EF_LANDFILL, "IPCC 2006"),
    ("EF-DA", "anaerobic_digestion", EF_ANAEROBIC_DIGESTION, "IPCC 2006"),
    ("EF-COMP", "composting", 0.050, "IPCC 2006"),
    ("EF-OPS", "operations", EF_OPERATIONS, "APA 2023"),
    ("EF-REJ", "rejected", EF_REJECTED, "IPCC 2006"),
]

# ---------------------------------------------------------------------------
# Production and revenue model
# ---------------------------------------------------------------------------
COMPOST_SHARE = 0.30
DIGESTION_SHARE = 0.70
BIOGAS_M3_PER_TON = 120.0
ENERGY_KWH_PER_M3 = 6.0

COMPOST_EUR_PER_TON = 15.0
ENERGY_EUR_PER_KWH = 0.08
RECYCLABLE_RECOVERY_SHARE = 0.40
RECYCLABLE_EUR_PER_TON = 5.0

# Planned budget as a share of realised cost. Placeholder until a real
# budget series exists; the variance is ~5% by construction.
PLANNED_BUDGET_FACTOR = 0.95

COST_CATEGORIES = [
    "collection_eur",
    "treatment_eur",
    "transport_eur",
    "labour_eur",
    "overhead_eur",
]

# ---------------------------------------------------------------------------
# Coverage and uptime
# ---------------------------------------------------------------------------
COVERAGE_MIN_KG_PER_CAPITA_YEAR = 1.0
SCHEDULABLE_HOURS_PER_MONTH = 30 * 24

# ---------------------------------------------------------------------------
# Trend thresholds, one set per metric
# ---------------------------------------------------------------------------
SEMAPHORE_WINDOW_MONTHS = 6

# SEM-01 volume slope (kg/month)
VOLUME_POSITIVE_ABOVE = 0.0
VOLUME_NEGATIVE_BELOW = -50.0

# SEM-01 contamination slope (pp/month), falling contamination is positive
CONTAMINATION_POSITIVE_BELOW = -0.1
CONTAMINATION_NEGATIVE_ABOVE = 0.1

# SEM-01 critical alerts per ton
ALERTS_POSITIVE_BELOW = 0.0
ALERTS_NEGATIVE_ABOVE = 0.01
ALERTS_ELEVATED_AVERAGE = 0.5

# SEM-02 CO2 avoided per ton slope and diversion slope
CO2_PER_TON_POSITIVE_ABOVE = 0.0
CO2_PER_TON_NEGATIVE_BELOW = -0.005
DIVERSION_POSITIVE_ABOVE = 0.0
DIVERSION_NEGATIVE_BELOW = -0.1

# SEM-03 biogas relative slope, lower bound of each colour
BIOGAS_COLOUR_BANDS: list[tuple[float, str, str]] = [
    (0.02, "green", "positive"),
    (-0.01, "yellow", "neutral"),
    (-0.03, "orange", "negative"),
]

# Bee2Waste municipality trend band on relative slope
BEE2WASTE_RELATIVE_BAND = 0.02

# Councillor parish trend band on GIS points (last vs first month)
PARISH_TREND_BAND_POINTS = 2.0
PARISH_TREND_MONTHS = 3
RANKING_SIZE = 5

# Fixed indicator values for single-month GIS snapshots
SNAPSHOT_ALERTS_PER_TON = 0.5
SNAPSHOT_CO2_PER_TON = 0.7

# Fleet efficiency reported by the operator (no route-level history yet)
FLEET_EFFICIENCY_PCT = 88.0

# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------
# (municipality_id, name, population, area_km2, color)
MUNICIPALITIES = [
    ("MUN-CAS", "Cascais", 214158, 97.4, "#3B82F6"),
    ("MUN-SIN", "Sintra", 391066, 319.2, "#22C55E"),
    ("MUN-OEI", "Oeiras", 178984, 45.7, "#F59E0B"),
    ("MUN-MAF", "Mafra", 82552, 291.7, "#8B5CF6"),
]

# (parish_id, municipality_id, name, population, area_km2)
PARISHES = [
    ("FRG-CAS-01", "MUN-CAS", "Cascais e Estoril", 64000, 18.5),
    ("FRG-CAS-02", "MUN-CAS", "Carcavelos e Parede", 52000, 9.8),
    ("FRG-CAS-03", "MUN-CAS", "São Domingos de Rana", 58000, 22.4),
    ("FRG-CAS-04", "MUN-CAS", "Alcabideche", 40158, 46.7),
    ("FRG-SIN-01", "MUN-SIN", "Agualva e Mira-Sintra", 85000, 10.2),
    ("FRG-SIN-02", "MUN-SIN", "Queluz e Belas", 110000, 28.5),
    ("FRG-SIN-03", "MUN-SIN", "Rio de Mouro", 78000, 16.4),
    ("FRG-SIN-04", "MUN-SIN", "Cacém e São Marcos", 68000, 11.8),
    ("FRG-SIN-05", "MUN-SIN", "Sintra (São Pedro)", 50066, 252.3),
    ("FRG-OEI-01", "MUN-OEI", "Oeiras e São Julião", 52000, 10.3),
    ("FRG-OEI-02", "MUN-OEI", "Algés, Linda-a-Velha e Cruz Quebrada", 55000, 8.1),
    ("FRG-OEI-03", "MUN-OEI", "Carnaxide e Queijas", 42000, 12.5),
    ("FRG-OEI-04", "MUN-OEI", "Porto Salvo", 29984, 14.8),
    ("FRG-MAF-01", "MUN-MAF", "Mafra", 18000, 42.1),
    ("FRG-MAF-02", "MUN-MAF", "Ericeira", 12000, 28.5),
    ("FRG-MAF-03", "MUN-MAF", "Malveira e São Miguel de Alcainça", 15000, 58.3),
    ("FRG-MAF-04", "MUN-MAF", "Enxara do Bispo e A-dos-Cunhados", 20000, 85.6),
    ("FRG-MAF-05", "MUN-MAF", "Venda do Pinheiro e Santo Estêvão", 17552, 77.2),
]

# (contamination_type_id, name, color, typical share of contaminants in %)
CONTAMINATION_TYPES = [
    ("CT-PLA", "Plastic", "#EF4444", 28),
    ("CT-VID", "Glass", "#10B981", 22),
    ("CT-PAP", "Paper/Cardboard", "#3B82F6", 18),
    ("CT-MET", "Metal", "#F59E0B", 12),
    ("CT-TEX", "Textile", "#8B5CF6", 8),
    ("CT-ORG", "Non-biodegradable organic", "#06B6D4", 7),
    ("CT-OUT", "Other", "#94A3B8", 5),
]

INCIDENT_SECTORS = ["sorting", "reception", "weighing", "compaction", "unloading"]
SEVERITIES = ["low", "medium", "high", "critical"]
ROUTE_STATES = ["concluded", "in_progress", "pending", "delayed"]
SHIFT_START_HOUR = {"morning": 6, "afternoon": 14, "night": 22}
