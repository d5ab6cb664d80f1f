"""
Web material catalog.

Each entry gives the Young's modulus of the material and the recommended
working strain window used to derive the simulation set-points:

    id:          unique identifier
    label:       display name
    E:           Young's modulus (Pa)
    base_strain: strain set-point of the first zone of a tension group
    strain_step: set-point increase per zone within a tension group
    max_strain:  final strain above which a zone is flagged as dangerous

The effective axial stiffness EA = E * thickness * width is computed per
request from the web thickness and width (see webline.config).

IMPORTANT: No unicode characters (Windows charmap constraint).
"""

MATERIALS = [
    {
        "id": "copper_foil",
        "label": "Copper foil",
        "E": 110e9,
        "base_strain": 5e-5,
        "strain_step": 5e-5,
        "max_strain": 3e-4,
    },
    {
        "id": "aluminum_foil",
        "label": "Aluminum foil",
        "E": 70e9,
        "base_strain": 4e-5,
        "strain_step": 4e-5,
        "max_strain": 3e-4,
    },
    {
        "id": "cathode",
        "label": "Cathode electrode",
        "E": 10e9,
        "base_strain": 8e-5,
        "strain_step": 8e-5,
        # Coated electrodes tolerate a little more
        "max_strain": 6e-4,
    },
    {
        "id": "anode",
        "label": "Anode electrode",
        "E": 8e9,
        "base_strain": 1.0e-4,
        "strain_step": 8e-5,
        "max_strain": 6e-4,
    },
    {
        "id": "separator",
        "label": "Separator film",
        "E": 2e9,
        "base_strain": 2.0e-4,
        "strain_step": 1.0e-4,
        "max_strain": 1.2e-3,
    },
    {
        "id": "pet",
        "label": "PET web",
        "E": 4e9,
        "base_strain": 1.5e-4,
        "strain_step": 7e-5,
        "max_strain": 8e-4,
    },
]

DEFAULT_MATERIAL_ID = "copper_foil"
DEFAULT_THICKNESS_UM = 70.0
DEFAULT_WIDTH_M = 0.12


def get_all_materials():
    """Return the full catalog, in display order."""
    return MATERIALS


def get_material_by_id(material_id):
    """Look up a material by its unique id. Returns None if not found."""
    for m in MATERIALS:
        if m["id"] == material_id:
            return m
    return None
