"""ABO/Rh compatibility between donor and recipient blood groups."""

BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]

# recipient -> donor groups it can receive from
DONOR_COMPATIBILITY = {
    "A+": ["A+", "A-", "O+", "O-"],
    "A-": ["A-", "O-"],
    "B+": ["B+", "B-", "O+", "O-"],
    "B-": ["B-", "O-"],
    "AB+": ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"],
    "AB-": ["A-", "B-", "AB-", "O-"],
    "O+": ["O+", "O-"],
    "O-": ["O-"],
}


def _normalize(blood_group) -> str:
    value = getattr(blood_group, "value", blood_group)
    return value.strip().upper() if isinstance(value, str) else ""


def compatible_donor_groups(blood_group) -> list[str]:
    """Donor groups whose blood a recipient of `blood_group` can receive. Unknown groups get []."""
    return list(DONOR_COMPATIBILITY.get(_normalize(blood_group), []))


def compatible_recipient_groups(blood_group) -> list[str]:
    """Recipient groups a donor of `blood_group` can give to."""
    donor = _normalize(blood_group)
    if donor not in DONOR_COMPATIBILITY:
        return []
    return [recipient for recipient, donors in DONOR_COMPATIBILITY.items() if donor in donors]


def can_donate_to(donor_group, recipient_group) -> bool:
    return _normalize(donor_group) in DONOR_COMPATIBILITY.get(_normalize(recipient_group), [])
