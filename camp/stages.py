"""
Stage ordering and transition rules for beneficiaries moving through a camp.

A beneficiary walks a fixed linear chain of stages:

    registration -> before_photo -> measurement -> fitment
        -> extra_items -> after_photo -> completed

``cancelled`` is a terminal side state reachable from any non-terminal stage.
Each stage owns the payload fields it writes; reverting out of a stage clears
them again.
"""

REGISTRATION = "registration"
BEFORE_PHOTO = "before_photo"
MEASUREMENT = "measurement"
FITMENT = "fitment"
EXTRA_ITEMS = "extra_items"
AFTER_PHOTO = "after_photo"
COMPLETED = "completed"
CANCELLED = "cancelled"

STEP_ORDER = [
    REGISTRATION,
    BEFORE_PHOTO,
    MEASUREMENT,
    FITMENT,
    EXTRA_ITEMS,
    AFTER_PHOTO,
    COMPLETED,
]

STEP_CHOICES = [
    (REGISTRATION, "Registration"),
    (BEFORE_PHOTO, "Before Photo"),
    (MEASUREMENT, "Measurement"),
    (FITMENT, "Fitment"),
    (EXTRA_ITEMS, "Extra Items"),
    (AFTER_PHOTO, "After Photo"),
    (COMPLETED, "Completed"),
    (CANCELLED, "Cancelled"),
]

TERMINAL_STEPS = {COMPLETED, CANCELLED}

# Payload fields written by each stage when it is advanced
STEP_FIELDS = {
    BEFORE_PHOTO: ["before_photo_url"],
    MEASUREMENT: ["measurement_data"],
    FITMENT: ["fitment_data"],
    EXTRA_ITEMS: ["extra_items"],
    AFTER_PHOTO: ["after_photo_url"],
}

# Stages a volunteer works on (registration happens once, at creation)
WORK_STEPS = [BEFORE_PHOTO, MEASUREMENT, FITMENT, EXTRA_ITEMS, AFTER_PHOTO]

VOLUNTEER_REQUIRED_STEPS = {MEASUREMENT, FITMENT, EXTRA_ITEMS, AFTER_PHOTO}

# Photo stages may be passed without a photo
SKIPPABLE_STEPS = {BEFORE_PHOTO, AFTER_PHOTO}

EXTRA_ITEM_CATALOG = {
    "stick": "Walking Stick",
    "shoes": "Shoes",
    "crutches": "Crutches",
    "walker": "Walker",
    "elbow_stick": "Elbow Stick",
}

# type_of_aid flag -> (extra item, quantity field)
AID_TO_EXTRA_ITEM = [
    ("stick", "stick", "stick_qty"),
    ("crutches", "crutches", "crutches_qty"),
    ("shoes", "shoes", None),
    ("walker", "walker", None),
    ("elbow_crutches", "elbow_stick", "elbow_crutches_qty"),
]

AID_LABELS = [
    ("left_below_knee", "Left Below Knee"),
    ("left_above_knee", "Left Above Knee"),
    ("right_below_knee", "Right Below Knee"),
    ("right_above_knee", "Right Above Knee"),
    ("left_caliper", "Left Caliper"),
    ("right_caliper", "Right Caliper"),
    ("above_hand", "Above Hand"),
    ("below_hand", "Below Hand"),
    ("shoes", "Shoes"),
    ("gloves", "Gloves"),
    ("walker", "Walker"),
]

AID_QUANTITY_LABELS = [
    ("stick", "stick_qty", "Stick"),
    ("crutches", "crutches_qty", "Crutches"),
    ("elbow_crutches", "elbow_crutches_qty", "Elbow Crutches"),
]


def is_known_step(step) -> bool:
    return step in STEP_ORDER or step == CANCELLED


def is_terminal(step) -> bool:
    return step in TERMINAL_STEPS


def successor(step: str) -> str:
    """Return the stage that follows ``step`` in the fixed order."""
    if step not in STEP_ORDER or step == COMPLETED:
        raise ValueError(f"Step {step!r} has no successor")
    return STEP_ORDER[STEP_ORDER.index(step) + 1]


def predecessor(step: str) -> str:
    """Return the stage that precedes ``step`` in the fixed order."""
    if step not in STEP_ORDER or step == REGISTRATION:
        raise ValueError(f"Step {step!r} has no predecessor")
    return STEP_ORDER[STEP_ORDER.index(step) - 1]


def can_revert(step: str) -> bool:
    """A non-terminal stage can be reverted when its predecessor is one volunteers can redo."""
    if step not in STEP_ORDER or step == REGISTRATION or is_terminal(step):
        return False
    return predecessor(step) in WORK_STEPS


def is_past(current_step: str, step: str) -> bool:
    """Whether a beneficiary at ``current_step`` has already passed ``step``."""
    if current_step not in STEP_ORDER or step not in STEP_ORDER:
        return False
    return STEP_ORDER.index(current_step) > STEP_ORDER.index(step)


def step_label(step: str) -> str:
    return dict(STEP_CHOICES).get(step, step)


def format_type_of_aid(type_of_aid) -> str:
    """Render the aid flags as the text shown on lists and exports."""
    if not type_of_aid:
        return "Not specified"

    parts = [label for key, label in AID_LABELS if type_of_aid.get(key)]
    for key, qty_key, label in AID_QUANTITY_LABELS:
        if type_of_aid.get(key):
            parts.append(f"{label} (Qty: {type_of_aid.get(qty_key) or 1})")
    if type_of_aid.get("others") and type_of_aid.get("others_specify"):
        parts.append(f"Other: {type_of_aid['others_specify']}")

    return ", ".join(parts) or "Not specified"


def suggested_extra_items(type_of_aid) -> list:
    """Extra items implied by the aid chosen at registration."""
    if not type_of_aid:
        return []

    suggestions = []
    for flag, item, qty_key in AID_TO_EXTRA_ITEM:
        if type_of_aid.get(flag):
            quantity = type_of_aid.get(qty_key) if qty_key else 1
            suggestions.append({"item": item, "quantity": max(int(quantity or 1), 1)})
    return suggestions
