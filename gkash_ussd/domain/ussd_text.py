"""Screen text for the USSD dialogue, keyed by screen name."""

TEXT = {
    "WELCOME_OPTIONS": "1. Create Account\n2. Main Menu\n3. Help",
    "WELCOME": "Welcome to GKash Fund Manager\n{options}",
    "WELCOME_INVALID": "Invalid option. Choose:\n{options}",
    "HELP": (
        "GKash Help\n\n"
        "Available Services:\n"
        "• Create Account - Set up new fund account\n"
        "• Deposit - Add money to your account\n"
        "• Withdraw - Take money from account\n"
        "• Check Balance - View account balance\n"
        "• Track Accounts - View all your accounts\n\n"
        "Support: Call 0700-GKASH"
    ),

    # Account creation
    "ASK_NAME": "Enter your full name:",
    "INVALID_NAME": "Invalid name. Enter your full name:",
    "ASK_PHONE": "Enter your phone number:",
    "INVALID_PHONE": "Invalid phone number. Enter phone (e.g. 0712345678):",
    "ASK_ID": "Enter your ID number (8 digits):",
    "INVALID_ID": "Invalid ID. Enter 8-digit ID number:",
    "ASK_PIN": "Create 4-digit PIN:",
    "INVALID_PIN": "Invalid PIN. Create 4-digit PIN (not 0000, 1234, etc):",
    "SELECT_ACCOUNT_TYPE": "Select Account Type:\n{menu}",
    "INVALID_ACCOUNT_TYPE": "Invalid selection. Choose 1-{count}:",
    "ACCOUNT_CREATED": (
        "Account Created Successfully!\n\n"
        "Name: {name}\n"
        "Account: {account_number}\n"
        "Type: {type_name}\n\n"
        "You can now deposit, withdraw, and check balance.\n\n"
        "Welcome to GKash!"
    ),

    # Main menu
    "MAIN_MENU": (
        "GKash Main Menu\n"
        "1. Deposit Money\n"
        "2. Withdraw Money\n"
        "3. Check Balance\n"
        "4. Track Accounts\n"
        "0. Exit"
    ),
    "MAIN_MENU_INVALID": "Invalid option. Choose 1-4 or 0:",
    "GOODBYE": "Thank you for using GKash!",

    # Deposit / withdraw / balance
    "ASK_DEPOSIT_AMOUNT": "Enter amount to deposit:",
    "INVALID_DEPOSIT_AMOUNT": "Invalid amount. Enter amount to deposit:",
    "CONFIRM_DEPOSIT": "Confirm deposit of KES {amount}\nEnter your PIN:",
    "ASK_WITHDRAW_AMOUNT": "Enter amount to withdraw:",
    "INVALID_WITHDRAW_AMOUNT": "Invalid amount. Enter amount to withdraw:",
    "CONFIRM_WITHDRAW": "Confirm withdrawal of KES {amount}\nEnter your PIN:",
    "ASK_BALANCE_PIN": "Enter your PIN:",
    "TRANSACTION_DONE": (
        "{title} Successful!\n\n"
        "Amount: KES {amount}\n"
        "New Balance: KES {balance}\n"
        "Account: {account_number}\n"
        "Time: {time}"
    ),
    "NO_ACCOUNTS_CREATE_FIRST": "No accounts found. Please create an account first.",
    "NO_ACCOUNTS": "No accounts found.",
    "INSUFFICIENT_FUNDS": "Insufficient funds. Minimum balance required: KES {min_balance}",
    "BALANCES_HEADER": "Account Balances:",
    "BALANCE_ENTRY": "{type_name}\nAccount: {account_number}\nBalance: KES {balance}",
    "BALANCES_UPDATED": "Updated: {time}",

    # Account tracking
    "ASK_TRACK_PIN": "Enter PIN to view accounts:",
    "ACCOUNT_LIST_HEADER": "Your Accounts:",
    "ACCOUNT_LIST_ENTRY": "{index}. {type_name} - KES {balance}",
    "ACCOUNT_LIST_FOOTER": "{history_index}. View Transaction History\n0. Main Menu",
    "INVALID_HISTORY_CHOICE": "Invalid selection. Try again:",
    "USER_NOT_FOUND": "User not found.",
    "NO_TRANSACTIONS": "No transactions found for this account.",
    "HISTORY_HEADER": "Transaction History:",
    "HISTORY_ENTRY": "{type} - KES {amount}\nBalance: KES {balance}\nDate: {date}",
    "HISTORY_MORE": "... and more",

    # Failures
    "INVALID_SESSION": "Invalid session",
    "INVALID_REQUEST": "Invalid request",
    "ERROR": "Error: {message}",
}


def t(key: str, **kwargs) -> str:
    text = TEXT[key]
    return text.format(**kwargs) if kwargs else text


def con(text: str) -> str:
    """Dialogue continues: the gateway will prompt the subscriber again."""
    return f"CON {text}"


def end(text: str) -> str:
    """Dialogue terminates: no further input under this session id."""
    return f"END {text}"


def is_end(response: str) -> bool:
    return response.startswith("END")
