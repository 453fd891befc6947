# config package: authoritative source for backend configuration.
#
# Sub-modules:
#   api_config.py    : endpoints, model lists, credential env vars, ordering
#   model_params.py  : request parameters, rate limits, rotation weights
#
# The classification prompt lives in src/classifier/config.py because it is
# rendered from the taxonomy.
