"""
Handle loading of private-key batches from JSON and deriver profiles from INI files.
"""
import configparser
import json
import os
from typing import Dict, List

PROFILE_SECTION = 'Deriver'


def load_key_definitions(keys_file_path: str) -> List[Dict]:
    """
    Loads a batch of private keys from a JSON file.

    The JSON file is expected to be a list of objects, each with a
    'private_key' hex string and an optional 'label'. Entries without a
    label are named 'key-<index>'.

    Args:
        keys_file_path (str): The path to the JSON file containing the keys.

    Returns:
        List[Dict]: One dictionary per key, each with 'label' and 'private_key'.

    Raises:
        FileNotFoundError: If the keys file cannot be found.
        ValueError: If the file is not a list or an entry lacks a string
            'private_key'.
    """
    try:
        with open(keys_file_path, 'r') as f:
            entries = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Keys file not found at: {keys_file_path}")

    if not isinstance(entries, list):
        raise ValueError(f"Expected a list of keys in {keys_file_path}")

    key_definitions = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or 'private_key' not in entry:
            raise ValueError(f"Entry {index} has no private_key in {keys_file_path}")
        if not isinstance(entry['private_key'], str):
            raise ValueError(f"Entry {index} private_key must be a hex string in {keys_file_path}")
        key_definitions.append({
            'label': entry.get('label') or f"key-{index}",
            'private_key': entry['private_key'],
        })

    return key_definitions


def load_profile(profile_name: str, profiles_dir_path: str) -> Dict:
    """
    Loads a specific deriver profile's parameters from an INI file.

    The INI file is expected to have a [Deriver] section.

    Args:
        profile_name (str): The name of the profile to load (e.g., 'default').
        profiles_dir_path (str): The path to the directory containing profile INI files.

    Returns:
        Dict: A dictionary of the settings from the [Deriver] section.

    Raises:
        FileNotFoundError: If the profile file cannot be found.
        ValueError: If the [Deriver] section is missing from the profile.
    """
    profile_file_path = os.path.join(profiles_dir_path, f"{profile_name}.ini")
    config = configparser.ConfigParser()

    if not config.read(profile_file_path):
        raise FileNotFoundError(f"Profile file not found at: {profile_file_path}")

    if PROFILE_SECTION not in config:
        raise ValueError(f"[{PROFILE_SECTION}] section not found in profile: {profile_file_path}")

    return dict(config[PROFILE_SECTION])
