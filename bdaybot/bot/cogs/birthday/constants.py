"""Birthday feature constants."""

# Year used to validate DD-MM input; a leap year so 29-02 is accepted
LEAP_REFERENCE_YEAR = 2024

REMINDER_TEMPLATE = "🎉 Happy Birthday {names}! 🎂🥳"
NAME_SEPARATOR = ", "

# Command replies
HELLO_TEXT = "Hello! I'm the Birthday Reminder Bot."
START_TEXT = (
    "Welcome to the Birthday Reminder Bot!\n\n"
    "Use `{prefix}add [name] [DD-MM]` to save a birthday for this group."
)
HELP_TEXT = """**Birthday Reminder Bot Commands!**

**Setup and Information**
• {prefix}add [name] [DD-MM] - Add or update a birthday
• {prefix}list - List all saved birthdays
• {prefix}remove [name] - Remove a birthday

**Notification Control**
• {prefix}enable - Enable birthday reminders in this group
• {prefix}disable - Disable birthday reminders in this group

**General**
• {prefix}help - Show this help message

Note: Birthday reminders are specific to this group only."""

ADD_USAGE = "Usage: {prefix}add [name] [DD-MM]"
REMOVE_USAGE = "Usage: {prefix}remove [name]"
INVALID_DATE = "Invalid Date! Please use a valid date in DD-MM format."

ADDED = "Added {name}'s birthday on {day:02d}-{month:02d} to list!"
REMOVED = "Removed {name}'s birthday from list!"
NOT_FOUND = "I couldn't find anyone named '{name}' in this group."
LIST_HEADER = "🎂 **Birthdays:**\n"
LIST_LINE = "- {name}: {day:02d}-{month:02d}"
LIST_EMPTY = "No birthdays in list yet. Use {prefix}add to start!"

ENABLED = "Birthday reminders are now enabled for this group!"
DISABLED = "Birthday reminders are now disabled for this group."
DISABLED_NOTICE = (
    "Birthday reminders are disabled in this group.\n"
    "Use {prefix}enable to turn them back on."
)

SAVE_FAILED = "Error saving birthday to database."
LIST_FAILED = "Could not retrieve birthday list."
REMOVE_FAILED = "Error removing birthday."
ENABLE_FAILED = "Failed to enable reminders."
DISABLE_FAILED = "Failed to disable reminders."
