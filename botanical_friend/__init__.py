from botanical_friend.extensions.config_values import LocalConfig, parse_settings

local_config = LocalConfig()
settings = parse_settings()
