import json
import logging
import os
from typing import Any
from typing import Dict
from typing import Optional

import yaml

"""
Configuration lookup for connection parameters.  A config file is a
json or yaml dict of sections, sections may inherit from each other:

    {
        "default": {"caldav_url": "https://cal.example.com/dav/"},
        "work": {"inherits": "default", "caldav_user": "me"}
    }

Keys prefixed with ``caldav_`` are passed to the DAVClient.  Environment
variables prefixed with ``CALREPORT_`` override the config file.
"""

ENV_PREFIX = "CALREPORT_"


def config_section(config: Dict[str, Any], section: str = "default") -> Dict[str, Any]:
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def read_config(fn: Optional[str]) -> Dict[str, Any]:
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config/"
        for config_file in (
            f"{cfgdir}/calreport/calendar.conf",
            f"{cfgdir}/calreport/calendar.yaml",
            f"{cfgdir}/calreport/calendar.json",
            "/etc/calreport/calendar.conf",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return {}

    try:
        with open(fn, "rb") as config_file:
            raw = config_file.read()
    except FileNotFoundError:
        logging.info("no config file found at %s", fn)
        return {}

    try:
        return json.loads(raw)
    except json.decoder.JSONDecodeError:
        pass
    try:
        cfg = yaml.safe_load(raw)
    except yaml.YAMLError:
        logging.error(
            f"config file {fn} exists but is neither valid json nor yaml.  It will be ignored",
            exc_info=True,
        )
        return {}
    if not isinstance(cfg, dict):
        logging.error(f"config file {fn} does not contain a dict of sections")
        return {}
    return cfg


def _from_environment() -> Dict[str, Any]:
    conf = {}
    for key in os.environ:
        if key.startswith(ENV_PREFIX) and not key.startswith(ENV_PREFIX + "CONFIG"):
            conf[key[len(ENV_PREFIX) :].lower()] = os.environ[key]
    return conf


def _coerce(conn_params: Dict[str, Any]) -> Dict[str, Any]:
    if "timeout" in conn_params and isinstance(conn_params["timeout"], str):
        conn_params["timeout"] = float(conn_params["timeout"])
    verify = conn_params.get("ssl_verify_cert")
    if isinstance(verify, str) and verify.lower() in ("0", "false", "no", "off"):
        conn_params["ssl_verify_cert"] = False
    elif isinstance(verify, str) and verify.lower() in ("1", "true", "yes", "on"):
        conn_params["ssl_verify_cert"] = True
    return conn_params


def get_connection_params(
    config_file: Optional[str] = None,
    section: Optional[str] = None,
    environment: bool = True,
) -> Dict[str, Any]:
    """
    Collects the DAVClient parameters from the config file section and
    the environment.  The environment wins.  ``CALREPORT_CONFIG_FILE``
    and ``CALREPORT_CONFIG_SECTION`` pick the file and section when not
    given.
    """
    if environment:
        config_file = config_file or os.environ.get(ENV_PREFIX + "CONFIG_FILE")
        section = section or os.environ.get(ENV_PREFIX + "CONFIG_SECTION")
    section = section or "default"

    conn_params: Dict[str, Any] = {}
    cfg = read_config(config_file)
    if cfg:
        for k, v in config_section(cfg, section).items():
            if k.startswith("caldav_") and v is not None and v != "":
                key = k[7:]
                if key == "pass":
                    key = "password"
                if key == "user":
                    key = "username"
                conn_params[key] = v
    if environment:
        conn_params.update(_from_environment())
    return _coerce(conn_params)
