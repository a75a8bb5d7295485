"""
Built-in sample records.

Substituted when no document can be loaded or when the document holds no
usable entry, so the presentation layer always has something to show.
"""

from heatmap.models import NormalizedRecord

SAMPLE_RECORDS: tuple[NormalizedRecord, ...] = (
    NormalizedRecord(
        id="Marie Dupont",
        surname="Dupont",
        given_name="Marie",
        home_address="15 rue de la Paix, 75001 Paris",
        institution_address="Université Paris 1",
        city="Paris",
        postal_code="75001",
        home_location=(48.8566, 2.3522),
        institution_location=(48.8467, 2.3431),
    ),
    NormalizedRecord(
        id="Pierre Martin",
        surname="Martin",
        given_name="Pierre",
        home_address="23 avenue Victor Hugo, 69003 Lyon",
        institution_address="Université Lyon 3",
        city="Lyon",
        postal_code="69003",
        home_location=(45.7640, 4.8357),
        institution_location=(45.7578, 4.8320),
    ),
    NormalizedRecord(
        id="Sophie Bernard",
        surname="Bernard",
        given_name="Sophie",
        home_address="8 boulevard Canebière, 13001 Marseille",
        institution_address="Université Aix-Marseille",
        city="Marseille",
        postal_code="13001",
        home_location=(43.2965, 5.3698),
        institution_location=(43.2951, 5.3656),
    ),
    NormalizedRecord(
        id="Jean Dubois",
        surname="Dubois",
        given_name="Jean",
        home_address="45 rue Alsace Lorraine, 31000 Toulouse",
        institution_address="Université Toulouse 1",
        city="Toulouse",
        postal_code="31000",
        home_location=(43.6047, 1.4442),
        institution_location=(43.6043, 1.4437),
    ),
    NormalizedRecord(
        id="Emma Thomas",
        surname="Thomas",
        given_name="Emma",
        home_address="12 cours Mirabeau, 13100 Aix-en-Provence",
        institution_address="Université Aix-Marseille",
        city="Aix-en-Provence",
        postal_code="13100",
        home_location=(43.5263, 5.4454),
        institution_location=(43.2951, 5.3656),
    ),
)


def sample_records() -> list[NormalizedRecord]:
    """Fresh list of the sample records (the records themselves are immutable)."""
    return list(SAMPLE_RECORDS)
