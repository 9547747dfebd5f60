"""
PassVault - Interactive Menu

Main user interface for the password manager.
Features:
- Sign up / sign in / sign out
- List credentials with search and category filter
- Add credentials (typed or generated passwords)
- Edit / delete credentials
- Copy a password to the clipboard
- Check the strength of any password
"""

import getpass
import os
import sys

import pyperclip

from passvault import config
from passvault.auth import AuthError, IdentityProvider
from passvault.credentials import CredentialsError, CredentialsService, filter_credentials
from passvault.generator import (
    GeneratorPolicy, InvalidPolicy, calculate_strength, clamp_length,
    generate_password, validate_password, MIN_LENGTH, MAX_LENGTH,
)
from passvault.models import ALL_CATEGORIES, CREDENTIAL_CATEGORIES, CredentialFormData, DEFAULT_CATEGORY
from passvault.store import DocumentStore


# Typed at an edit prompt to empty an optional field
CLEAR_FIELD = "-"


def clear_screen():
    os.system("cls" if os.name == "nt" else "clear")

def pause():
    input("\nPress Enter to continue...")

def ask_yes_no(prompt, default):
    hint = "[Y/n]" if default else "[y/N]"
    answer = input(f"{prompt} {hint}: ").strip().lower()
    if not answer:
        return default
    return answer in ('y', 'yes')

def edited_value(answer, current):
    """Blank keeps the current value, CLEAR_FIELD empties it."""
    answer = answer.strip()
    if answer == CLEAR_FIELD:
        return ""
    return answer or current

def show_strength(password):
    strength = calculate_strength(password)
    print(f"  Strength: {strength.label} ({strength.score}/7)")
    result = validate_password(password)
    for err in result.errors:
        print(f"  - {err}")

def choose_category(current=DEFAULT_CATEGORY):
    for i, name in enumerate(CREDENTIAL_CATEGORIES, 1):
        print(f"  {i}) {name}")
    choice = input(f"Category [{current}]: ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(CREDENTIAL_CATEGORIES):
        return CREDENTIAL_CATEGORIES[int(choice) - 1]
    return current

def ask_policy():
    policy = GeneratorPolicy()
    try:
        length = int(input(f"Length ({MIN_LENGTH}-{MAX_LENGTH}) [{policy.length}]: ").strip() or policy.length)
        policy.length = clamp_length(length)
    except ValueError:
        print(f"Not a number, using {policy.length}.")
    policy.include_uppercase = ask_yes_no("Uppercase?", policy.include_uppercase)
    policy.include_lowercase = ask_yes_no("Lowercase?", policy.include_lowercase)
    policy.include_numbers = ask_yes_no("Numbers?", policy.include_numbers)
    policy.include_symbols = ask_yes_no("Symbols?", policy.include_symbols)
    return policy

def ask_password(allow_generate=True):
    """Typed or generated password; None if the user gave up."""
    if allow_generate and ask_yes_no("Generate a password?", True):
        policy = ask_policy()
        try:
            password = generate_password(policy)
        except InvalidPolicy as e:
            print(f"ERROR: {e}")
            return None
        print(f"\nGenerated: {password}")
    else:
        password = getpass.getpass("Password: ")
        if not password:
            return None
    show_strength(password)
    return password

def copy_to_clipboard(text):
    try:
        pyperclip.copy(text)
        print("\n✓ Copied to clipboard!")
    except pyperclip.PyperclipException as e:
        print(f"\nERROR: Failed to copy to clipboard ({e}).")

def print_table(credentials):
    print(f"{'#':<4}  {'Site':<22}  {'Username':<22}  {'Category':<14}")
    print("-" * 68)
    for i, c in enumerate(credentials, 1):
        print(f"{i:<4}  {c.site:<22}  {c.username:<22}  {c.category:<14}")

def pick_credential(service):
    credentials = service.get_credentials()
    if not credentials:
        print("No credentials yet.")
        return None
    print_table(credentials)
    choice = input(f"\nEnter # (1-{len(credentials)}): ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(credentials):
        return credentials[int(choice) - 1]
    print("Cancelled.")
    return None

def cmd_sign_up(auth):
    clear_screen()
    print("=== Create Account ===\n")
    email = input("Email: ").strip()
    while True:
        pw = getpass.getpass("Password: ")
        pw2 = getpass.getpass("Confirm: ")
        if pw != pw2:
            print("Passwords don't match.\n")
            continue
        break
    try:
        auth.sign_up(email, pw)
        print("\n✓ Account created successfully!")
    except AuthError as e:
        print(f"\nERROR: {e}")
    pause()

def cmd_sign_in(auth):
    clear_screen()
    print("=== Sign In ===\n")
    email = input("Email: ").strip()
    pw = getpass.getpass("Password: ")
    try:
        auth.sign_in(email, pw)
        print("\n✓ Signed in.")
    except AuthError as e:
        print(f"\nERROR: {e}")
    pause()

def cmd_list(service):
    clear_screen()
    print("=== Credentials ===\n")
    term = input("Search (site, username or category) [none]: ").strip()
    category = ALL_CATEGORIES
    if ask_yes_no("Filter by category?", False):
        category = choose_category(ALL_CATEGORIES)
    try:
        credentials = filter_credentials(service.get_credentials(), term, category)
        if not credentials:
            print("\nNo credentials found.")
        else:
            print()
            print_table(credentials)
    except CredentialsError as e:
        print(f"ERROR: {e}")
    pause()

def cmd_add(service):
    clear_screen()
    print("=== Add Credential ===\n")
    site = input("Site (required): ").strip()
    username = input("Username (required): ").strip()
    if not site or not username:
        print("Site and username are required.")
        pause()
        return
    password = ask_password()
    if not password:
        print("Cancelled.")
        pause()
        return
    category = choose_category()
    notes = input("Notes (optional): ").strip()
    try:
        cid = service.add_credential(CredentialFormData(site, username, password, category, notes))
        print(f"\n✓ Added! ID: {cid}")
    except CredentialsError as e:
        print(f"ERROR: {e}")
    pause()

def cmd_edit(service):
    clear_screen()
    print("=== Edit Credential ===\n")
    try:
        cred = pick_credential(service)
        if not cred:
            pause()
            return
        form = cred.to_form_data()
        form.site = input(f"Site [{form.site}]: ").strip() or form.site
        form.username = input(f"Username [{form.username}]: ").strip() or form.username
        if ask_yes_no("Change password?", False):
            form.password = ask_password() or form.password
        form.category = choose_category(form.category)
        form.notes = edited_value(input(f"Notes [{form.notes}] ('{CLEAR_FIELD}' clears): "), form.notes)
        service.update_credential(cred.id, form)
        print("\n✓ Saved.")
    except CredentialsError as e:
        print(f"ERROR: {e}")
    pause()

def cmd_show(service):
    clear_screen()
    print("=== View Credential ===\n")
    try:
        cred = pick_credential(service)
        if not cred:
            pause()
            return
        print(f"\n  Site: {cred.site}")
        print(f"  Username: {cred.username}")
        print(f"  Category: {cred.category}")
        if cred.notes:
            print(f"  Notes: {cred.notes}")
        print(f"  Updated: {cred.updated_at:%Y-%m-%d %H:%M}")

        print("\nOptions:")
        print("  1) Show password")
        print("  2) Copy to clipboard (without showing)")
        print("  0) Cancel")
        choice = input("\n> ").strip()
        if choice == '1':
            print(f"\n  Password: {cred.password}")
            show_strength(cred.password)
        elif choice == '2':
            copy_to_clipboard(cred.password)
    except CredentialsError as e:
        print(f"ERROR: {e}")
    pause()

def cmd_delete(service):
    clear_screen()
    print("=== Delete Credential ===\n")
    try:
        cred = pick_credential(service)
        if not cred:
            pause()
            return
        print(f"\nAbout to delete {cred.username} @ {cred.site}")
        if input("Type 'yes' to confirm: ").strip().lower() != 'yes':
            print("Cancelled.")
        else:
            service.delete_credential(cred.id)
            print("\n✓ Deleted.")
    except CredentialsError as e:
        print(f"ERROR: {e}")
    pause()

def cmd_check_strength():
    clear_screen()
    print("=== Check Password Strength ===\n")
    password = getpass.getpass("Password: ")
    show_strength(password)
    pause()

def print_menu(session, db_path):
    print("PassVault - Interactive Menu")
    print("=" * 40)
    print(f"Database: {db_path}")
    print(f"Signed in: {session.email if session else '-'}")
    if session:
        print("\n 1) List / search credentials")
        print(" 2) Add credential")
        print(" 3) View / copy credential")
        print(" 4) Edit credential")
        print(" 5) Delete credential")
        print(" 6) Check password strength")
        print(" 7) Sign out")
    else:
        print("\n 1) Sign in")
        print(" 2) Create account")
        print(" 6) Check password strength")
    print(" 0) Exit")

def main_menu(db_path):
    with DocumentStore(db_path) as store:
        auth = IdentityProvider(store)
        state = {'service': None}

        def on_change(session):
            state['service'] = CredentialsService(store, session) if session else None

        auth.on_auth_state_changed(on_change)

        while True:
            clear_screen()
            print_menu(auth.current_session, db_path)
            c = input("\n> ").strip()
            service = state['service']
            if c == '0':
                auth.sign_out()
                print("\nGoodbye!")
                break
            elif c == '6':
                cmd_check_strength()
            elif service is None:
                if c == '1':
                    cmd_sign_in(auth)
                elif c == '2':
                    cmd_sign_up(auth)
            elif c == '1':
                cmd_list(service)
            elif c == '2':
                cmd_add(service)
            elif c == '3':
                cmd_show(service)
            elif c == '4':
                cmd_edit(service)
            elif c == '5':
                cmd_delete(service)
            elif c == '7':
                auth.sign_out()

def main():
    config.configure_logging()
    db_path = config.get_db_path()
    d = os.path.dirname(db_path)
    if d:
        os.makedirs(d, exist_ok=True)
    try:
        main_menu(db_path)
    except KeyboardInterrupt:
        print("\nExiting...")
    return 0

if __name__ == "__main__":
    sys.exit(main())
