"""Constants for the EV Chargeulator integration."""

DOMAIN = "ev_chargeulator"

# Configuration Keys
CONF_PRICE_ENTITY = "price_entity_id"
CONF_SOC_ENTITY = "soc_entity_id"
CONF_BATTERY_SIZE = "battery_size_kwh"

# Charge Rates
CONF_ENERGY_IN_VALUE = "energy_in_value"
CONF_ENERGY_IN_UNIT = "energy_in_unit"
CONF_ENERGY_OUT_VALUE = "energy_out_value"
CONF_ENERGY_OUT_UNIT = "energy_out_unit"

# Planning Parameters
CONF_TARGET_SOC = "target_soc_percent"
CONF_MIN_SLOTS_PER_WINDOW = "min_slots_per_window"
CONF_MAX_WINDOWS = "max_windows"
CONF_COMPLETE_BY = "complete_by"

# Debugging
CONF_FILE_LOGGING = "file_logging"

# Defaults
DEFAULT_NAME = "EV Chargeulator"
DEFAULT_BATTERY_SIZE = 60.0
DEFAULT_ENERGY_IN_VALUE = 7.0
DEFAULT_ENERGY_UNIT = "kW"
DEFAULT_TARGET_SOC = 90.0
DEFAULT_MIN_SLOTS_PER_WINDOW = 1
DEFAULT_MAX_WINDOWS = 3
DEFAULT_FILE_LOGGING = False

# Price sensor attributes (Nord Pool)
ATTR_RAW_TODAY = "raw_today"
ATTR_RAW_TOMORROW = "raw_tomorrow"

# Services
SERVICE_RECALCULATE = "recalculate_plan_now"

# Dispatcher signal for entity updates
SIGNAL_UPDATE = f"{DOMAIN}_update"
