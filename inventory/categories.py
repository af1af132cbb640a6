"""Category metadata: the specification fields each category offers.

Static data consumed at the API boundary to validate specification keys and
select values, and served to clients to render category-specific forms. Stock
invariants never depend on it.
"""

from common.choices import ItemCategory, ItemCondition

TEXT = "text"
SELECT = "select"
TEXTAREA = "textarea"

# Written by the return flow; allowed for every category.
DERIVED_FIELDS = ("condition", "returned_at")


def _field(name, label, type_=TEXT, options=None, placeholder=""):
    field = {"name": name, "label": label, "type": type_}
    if options:
        field["options"] = list(options)
    if placeholder:
        field["placeholder"] = placeholder
    return field


CATEGORY_FIELDS = {
    ItemCategory.LAPTOP: [
        _field("model", "Model", placeholder='e.g., Dell XPS 15 / MacBook Pro 14"'),
        _field("ram", "RAM", SELECT, ["4GB", "8GB", "12GB", "16GB", "24GB", "32GB", "64GB", "128GB"]),
        _field(
            "storage",
            "Storage",
            SELECT,
            ["256GB SSD", "512GB SSD", "1TB SSD", "2TB SSD", "4TB SSD", "500GB HDD", "1TB HDD"],
        ),
        _field("serialNumber", "Serial Number", placeholder="Enter serial number"),
        _field(
            "company",
            "Company/Brand",
            SELECT,
            [
                "Dell",
                "HP",
                "Lenovo",
                "Apple",
                "Asus",
                "Acer",
                "Microsoft",
                "Samsung",
                "Toshiba",
                "MSI",
                "Huawei",
                "Other",
            ],
        ),
    ],
    ItemCategory.DESKTOP: [
        _field("model", "Model", placeholder="e.g., OptiPlex 7090"),
        _field("processor", "Processor", placeholder="e.g., Core i7-12700"),
        _field("ram", "RAM", SELECT, ["8GB", "16GB", "32GB", "64GB", "128GB"]),
        _field("gpu", "GPU", placeholder="e.g., RTX 3060"),
        _field(
            "company",
            "Company/Brand",
            SELECT,
            ["Dell", "HP", "Lenovo", "Custom Built", "Apple", "Acer", "ASUS", "Other"],
        ),
    ],
    ItemCategory.ACCESSORIES: [
        _field("type", "Type", placeholder="e.g., Mouse, Keyboard, Monitor, Phone"),
        _field("model", "Model", placeholder="Enter model"),
        _field(
            "company",
            "Company/Brand",
            SELECT,
            ["Logitech", "Razer", "Apple", "Samsung", "Dell", "LG", "Sony", "Anker", "Belkin", "UGREEN", "Other"],
        ),
        _field(
            "connectionType",
            "Connection Type",
            SELECT,
            ["Wired", "Wireless", "Bluetooth", "USB-C", "Lightning", "Other"],
        ),
    ],
    ItemCategory.FURNITURE: [
        _field("type", "Type", SELECT, ["Chair", "Desk", "Table", "Cabinet", "Other"]),
        _field("color", "Color", placeholder="e.g., Black, Wood"),
        _field("dimensions", "Dimensions", placeholder="e.g., 120x60cm"),
        _field("brand", "Brand", placeholder="e.g., IKEA, Herman Miller"),
    ],
    ItemCategory.OTHER: [
        _field("specifications", "Specifications", TEXTAREA, placeholder="Enter detailed specifications"),
    ],
}


def fields_for(category: str) -> list[dict]:
    return CATEGORY_FIELDS.get(category, [])


def validate_specifications(category: str, specifications: dict) -> list[str]:
    """Return a list of problems with `specifications` for `category` (empty when valid)."""
    errors = []
    fields = {f["name"]: f for f in fields_for(category)}
    for key, value in specifications.items():
        if key in DERIVED_FIELDS:
            if key == "condition" and value not in ItemCondition.values:
                errors.append(f"condition must be one of: {', '.join(ItemCondition.values)}.")
            continue
        field = fields.get(key)
        if field is None:
            errors.append(f"'{key}' is not a {category} field.")
            continue
        if field["type"] == SELECT and value and value not in field["options"]:
            errors.append(f"'{value}' is not a valid {field['label']}.")
    return errors


def as_metadata() -> list[dict]:
    return [{"category": category, "fields": fields_for(category)} for category in ItemCategory.values]
