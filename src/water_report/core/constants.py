"""
Application-wide constants for water compliance reporting.

This module defines regulatory limits, classification thresholds and report
layout defaults used throughout the application.
"""

# Regulatory compliance bands (used for scoring)
PH_MIN = 5.0
PH_MAX = 9.0
CHLORINE_MAX = 5.0  # mg/L
TURBIDITY_MAX = 5.0  # NTU

# Operator pH display range. Informational only, never used for scoring.
OPERATOR_PH_DISPLAY_MIN = 6.5
OPERATOR_PH_DISPLAY_MAX = 8.5

# Risk tier thresholds (deviation percentage past the violated bound)
RISK_LOW_MAX_DEVIATION = 10.0
RISK_MEDIUM_MAX_DEVIATION = 25.0

# Overall compliance rate below which a general review is recommended
GENERAL_REVIEW_THRESHOLD = 90.0

# Numeric precision for every figure shown in a report
DECIMAL_PLACES = 2

# Volume interpolation tolerance (m³)
VOLUME_ROUNDING_TOLERANCE = 0.01

# Report layout defaults
DEFAULT_POINTS_PER_PAGE = 4
DEFAULT_MAX_NONCONFORMITY_ROWS = 10
DEFAULT_MAX_TABLE_ROWS = 30

# Export capture defaults (seconds)
DEFAULT_CAPTURE_TIMEOUT = 5.0
DEFAULT_POLL_INTERVAL = 0.1

# Chart snapshot rendering
CHART_DPI = 120
CHART_SIZE_INCHES = (6.0, 3.0)

DEFAULT_TIMEZONE = "America/Sao_Paulo"
REPORT_TITLE = "Relatório de Qualidade da Água"
REPORT_ID_PREFIX = "WQR"
SYSTEM_NAME = "ACQUASALLES Water Quality Monitoring System"

# User-visible messages. The two must never be conflated.
NO_DATA_MESSAGE = "No data for this period"
SOURCE_UNREACHABLE_MESSAGE = "Could not reach data source"

# Display unit per parameter label
PARAMETER_UNITS = {
    "pH": "",
    "Cloro": "mg/L",
    "Turbidez": "NTU",
    "Volume": "m³",
    "Vazão": "L/h",
    "Hidrômetro": "m³",
    "Condutividade": "μS/cm",
    "ORP": "mV",
    "Oxigênio": "mg/L",
    "Pressão": "bar",
    "TDS": "ppm",
}

# Chart colour per parameter label
MEASUREMENT_COLORS = {
    "pH": "#3b82f6",
    "Cloro": "#10b981",
    "Turbidez": "#ef4444",
    "Vazão": "#f59e0b",
    "ORP": "#8b5cf6",
    "Hidrômetro": "#ec4899",
    "Condutividade": "#0ea5e9",
    "Oxigênio": "#22c55e",
    "Pressão": "#f97316",
    "TDS": "#a855f7",
    "Volume": "#f59e0b",
}

FALLBACK_COLORS = [
    "#3b82f6",
    "#10b981",
    "#ef4444",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
    "#0ea5e9",
    "#22c55e",
    "#f97316",
    "#a855f7",
]

# Table cell status colours
STATUS_COLORS = {
    "normal": "#10B981",
    "warning": "#F59E0B",
    "critical": "#EF4444",
}
