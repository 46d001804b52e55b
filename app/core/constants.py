"""
Reference data shared by report forms, public admin scopes and validation.
"""

from typing import Dict, List

JHARKHAND_DISTRICTS: List[str] = [
    "Bokaro", "Chatra", "Deoghar", "Dhanbad", "East Singhbhum", "Giridih",
    "Godda", "Gumla", "Hazaribagh", "Jamtara", "Koderma", "Khunti",
    "Lohardaga", "Pakur", "Palamu", "Ramgarh", "Ranchi", "Sahebganj",
    "Seraikela Kharsawan", "Simdega", "Dumka", "Garhwa", "Latehar", "West Singhbhum",
]

CATEGORIES: List[str] = [
    "Municipal",
    "Fire Department",
    "Water Supply",
    "Electricity",
    "Sewage & Drainage",
    "Public Safety",
    "Others",
]

SUBCATEGORIES: Dict[str, List[str]] = {
    "Municipal": [
        "Pothole",
        "Overflowing Garbage Bin",
        "Broken Streetlight",
        "Road Construction",
        "Park Maintenance",
        "Other Municipal Issue",
    ],
    "Fire Department": [
        "Fire Hazard",
        "Emergency Access",
        "Fire Safety Equipment",
        "Other Fire Safety Issue",
    ],
    "Water Supply": [
        "No Water Supply",
        "Contaminated Water",
        "Pipe Leakage",
        "Low Water Pressure",
        "Other Water Issue",
    ],
    "Electricity": [
        "Power Outage",
        "Damaged Power Lines",
        "Faulty Street Lights",
        "Transformer Issues",
        "Other Electricity Issue",
    ],
    "Sewage & Drainage": [
        "Blocked Drain",
        "Sewage Overflow",
        "Poor Drainage",
        "Other Drainage Issue",
    ],
    "Public Safety": [
        "Traffic Signal Issues",
        "Road Safety",
        "Public Lighting",
        "Other Safety Issue",
    ],
    "Others": [
        "Environmental Issue",
        "Public Transport",
        "General Complaint",
        "Other Issue",
    ],
}

REPORT_STATUS_LABELS: Dict[str, str] = {
    "submitted": "Submitted",
    "in_progress": "In Progress",
    "resolved": "Resolved",
    "false_complaint": "False Complaint",
    "withdrawn": "Withdrawn",
}

# Firestore collections
USER_PROFILES = "user_profiles"
PUBLIC_ADMINS = "public_admins"
REPORTS = "reports"
REASSIGNMENT_REQUESTS = "reassignment_requests"
