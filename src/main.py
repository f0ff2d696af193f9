"""
The application's entry point. Parses command-line arguments, drives the
KeyDeriver over the requested keys and prints results and progress.
"""
import argparse
import time

import config_manager as cm
from errors import Secp256k1Error
from key_deriver import KeyDeriver

# --- Constants ---
# Assumes the script is run from the root of the repository
PROFILES_DIR = 'profiles'
DEFAULT_PROFILE = 'default'


def main():
    """
    Main application entry point.
    - Parses command-line arguments.
    - Loads the profile and the private keys.
    - Derives each key's public key and address with the KeyDeriver.
    - Reports progress and prints a final summary.
    """
    parser = argparse.ArgumentParser(description="Derive secp256k1 public keys and Ethereum addresses from private keys.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--key', action='append', help='A hex private key. May be given more than once.')
    source.add_argument('--keys-file', type=str, help='A JSON file with a list of {"label", "private_key"} entries.')
    parser.add_argument('--profile', type=str, default=DEFAULT_PROFILE, help='The deriver profile to use (e.g., "default").')
    args = parser.parse_args()

    print(f"Loading profile '{args.profile}'...")
    try:
        profile_config = cm.load_profile(args.profile, PROFILES_DIR)
        if args.keys_file:
            key_definitions = cm.load_key_definitions(args.keys_file)
        else:
            key_definitions = [
                {'label': f"key-{i}", 'private_key': key} for i, key in enumerate(args.key)
            ]
        deriver = KeyDeriver(key_definitions, profile_config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading configuration: {e}")
        return

    total_keys = deriver.get_total_keys()
    print(f"Deriving {total_keys} key(s)...")

    # --- Progress Reporting Setup ---
    start_time = time.time()
    last_report_time = start_time
    failures = 0

    while not deriver.is_finished():
        label = deriver.next_label()
        try:
            result = deriver.step()
            print(deriver.format_result(result))
        except Secp256k1Error as e:
            failures += 1
            print(f"Error deriving key '{label}': {e}")

        current_time = time.time()
        if current_time - last_report_time >= deriver.progress_interval:
            done = deriver.get_total_keys_processed()
            total_runtime = current_time - start_time
            kps = done / total_runtime if total_runtime > 0 else 0
            print(f"Runtime: {total_runtime:.2f}s | Keys: {done}/{total_keys} ({kps:.3f} keys/s)")
            last_report_time = current_time

    # --- Summary ---
    total_runtime = time.time() - start_time
    print("\n" + "="*50)
    print(f"  Keys derived: {deriver.get_total_keys_derived()}/{total_keys}")
    if failures:
        print(f"  Failed keys:  {failures}")
    print("="*50)
    print(f"Total derivation time: {total_runtime:.2f} seconds")


if __name__ == "__main__":
    main()
