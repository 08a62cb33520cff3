import json
import logging
import os

from gi.repository import GLib

from accent import AccentStyle
from grammar import InputMethod
import vi_data

logger = logging.getLogger(__name__)

NAME_TO_LOGGING_LEVEL = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}


def get_package_name():
    '''
    returns 'ibus-vi'
    '''
    return 'ibus-vi'


def get_version():
    return '0.1.0'


def get_datadir():
    '''
    Return the directory holding the packaged data (config.json, layouts/).
    '''
    return vi_data.DATA_DIR


def get_default_config_path():
    '''
    Return the path to the default config file shipped with the package.
    This is the config.json that gets copied to user's home on first run.
    '''
    return os.path.join(get_datadir(), 'config.json')


def get_user_config_dir():
    '''
    Return the path to the config directory under $HOME.
    Typically, it would be $HOME/.config/ibus-vi
    '''
    return os.path.join(GLib.get_user_config_dir(), get_package_name())


def _append_warning(warnings, warning_msg):
    logger.warning(warning_msg)
    return warnings + ("\n" if warnings else "") + warning_msg


def get_default_config_data():
    '''
    Raises:
        FileNotFoundError: the packaged config.json is missing (broken installation)
    '''
    default_config_path = get_default_config_path()
    if not os.path.exists(default_config_path):
        logger.error(f'config.json is not found under {default_config_path}. Please check that installation was done without problem!')
        raise FileNotFoundError(f'Default config.json is missing: {default_config_path}')
    with open(default_config_path, encoding='utf-8') as f:
        return json.load(f)


def get_config_data():
    '''
    Load config.json from $HOME/.config/ibus-vi .
    When the file is not present (e.g., after initial installation), the
    default config.json is copied there first.

    Returns:
        tuple: (config_data, warnings_string) where warnings_string is empty if no warnings
    '''
    config_dir = get_user_config_dir()
    configfile_path = os.path.join(config_dir, 'config.json')
    default_config = get_default_config_data()
    warnings = ""

    if not os.path.exists(configfile_path):
        warnings = _append_warning(warnings, f'config.json is not found under {config_dir} . Copying the default config.json from {get_default_config_path()} ..')
        os.makedirs(config_dir, exist_ok=True)
        with open(configfile_path, 'w', encoding='utf-8') as f:
            json.dump(default_config, f, ensure_ascii=False, indent=2)
        return dict(default_config), warnings
    try:
        with open(configfile_path, encoding='utf-8') as f:
            config_data = json.load(f)
    except json.decoder.JSONDecodeError as e:
        logger.error(f'Error loading the config.json under {config_dir}')
        logger.error(e)
        logger.error(f'Using (but not copying) the default config.json from {get_default_config_path()} ..')
        return dict(default_config), warnings

    if not isinstance(config_data, dict):
        warnings = _append_warning(warnings, f'config.json under {config_dir} is not a JSON object. Using the default config.json')
        return dict(default_config), warnings

    for k in default_config:
        if k not in config_data:
            warnings = _append_warning(warnings, f'The key "{k}" was not found in the config.json under {config_dir} . Copying the default key-value')
            config_data[k] = default_config[k]
        if type(config_data[k]) != type(default_config[k]):
            warnings = _append_warning(warnings, f'Type mismatch found for the key "{k}" between config.json under {config_dir} and default config.json. Replacing the value of this key with the value in default config.json')
            config_data[k] = default_config[k]

    return config_data, warnings


def save_config_data(config_data):
    '''
    Save config data to the user config directory.

    Returns:
        bool: True if save was successful, False otherwise
    '''
    configfile_path = os.path.join(get_user_config_dir(), 'config.json')

    try:
        os.makedirs(get_user_config_dir(), exist_ok=True)
        with open(configfile_path, 'w', encoding='utf-8') as f:
            json.dump(config_data, f, ensure_ascii=False, indent=2)
        logger.info(f'Configuration saved successfully to {configfile_path}')
        return True
    except OSError as e:
        logger.error(f'Error saving config.json to {configfile_path}')
        logger.error(e)
        return False


def get_input_method(config):
    try:
        return InputMethod.from_name(config.get('input_method', 'telex'))
    except ValueError as e:
        logger.warning(f'{e}. Falling back to telex')
        return InputMethod.TELEX


def get_accent_style(config):
    try:
        return AccentStyle.from_name(config.get('accent_style', 'new'))
    except ValueError as e:
        logger.warning(f'{e}. Falling back to the new style')
        return AccentStyle.NEW


def get_logging_level(config):
    name = str(config.get('logging_level', 'WARNING')).upper()
    if name not in NAME_TO_LOGGING_LEVEL:
        logger.warning(f'Unknown logging_level "{name}". Falling back to WARNING')
        return logging.WARNING
    return NAME_TO_LOGGING_LEVEL[name]
