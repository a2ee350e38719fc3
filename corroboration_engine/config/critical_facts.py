"""Known officeholders used to catch outdated "X is the current Y" claims.

Each row records who held a role for an entity and when. A row with
``valid_until="present"`` is the current holder; closed rows let the
engine flag claims that present a former holder as current.

Rows are reviewed by hand. Update them when an office changes hands.
"""

from datetime import date

from corroboration_engine.schemas.claim_schema import CriticalFact


def _fact(subject, role, entity, valid_from, valid_until="present", source=""):
    return CriticalFact(
        subject=subject,
        role=role,
        entity=entity,
        valid_from=date.fromisoformat(valid_from),
        valid_until=(
            valid_until if valid_until == "present" else date.fromisoformat(valid_until)
        ),
        source=source,
    )


CRITICAL_FACTS: tuple[CriticalFact, ...] = (
    # Heads of state and government
    _fact("Joe Biden", "President", "United States", "2021-01-20", "2025-01-20", "whitehouse.gov"),
    _fact("Donald Trump", "President", "United States", "2025-01-20", source="whitehouse.gov"),
    _fact("Emmanuel Macron", "President", "France", "2017-05-14", source="elysee.fr"),
    _fact("François Bayrou", "Prime Minister", "France", "2024-12-13", "2025-09-09", "gouvernement.fr"),
    _fact("Sébastien Lecornu", "Prime Minister", "France", "2025-09-09", source="gouvernement.fr"),
    _fact("Olaf Scholz", "Chancellor", "Germany", "2021-12-08", "2025-05-06", "bundesregierung.de"),
    _fact("Friedrich Merz", "Chancellor", "Germany", "2025-05-06", source="bundesregierung.de"),
    _fact("Keir Starmer", "Prime Minister", "United Kingdom", "2024-07-05", source="gov.uk"),
    _fact("Rishi Sunak", "Prime Minister", "United Kingdom", "2022-10-25", "2024-07-05", "gov.uk"),
    _fact("Charles III", "King", "United Kingdom", "2022-09-08", source="royal.uk"),
    _fact("Justin Trudeau", "Prime Minister", "Canada", "2015-11-04", "2025-03-14", "pm.gc.ca"),
    _fact("Mark Carney", "Prime Minister", "Canada", "2025-03-14", source="pm.gc.ca"),
    _fact("Giorgia Meloni", "Prime Minister", "Italy", "2022-10-22", source="governo.it"),
    _fact("Xi Jinping", "President", "China", "2013-03-14", source="gov.cn"),
    _fact("Vladimir Putin", "President", "Russia", "2012-05-07", source="kremlin.ru"),
    _fact("Volodymyr Zelenskyy", "President", "Ukraine", "2019-05-20", source="president.gov.ua"),
    _fact("Narendra Modi", "Prime Minister", "India", "2014-05-26", source="pmindia.gov.in"),
    _fact("Luiz Inácio Lula da Silva", "President", "Brazil", "2023-01-01", source="gov.br"),
    _fact("Fumio Kishida", "Prime Minister", "Japan", "2021-10-04", "2024-10-01", "kantei.go.jp"),
    _fact("Shigeru Ishiba", "Prime Minister", "Japan", "2024-10-01", "2025-10-21", "kantei.go.jp"),
    _fact("Sanae Takaichi", "Prime Minister", "Japan", "2025-10-21", source="kantei.go.jp"),
    # Religious leaders
    _fact("Pope Francis", "Pope", "Catholic Church", "2013-03-13", "2025-04-21", "vatican.va"),
    _fact("Pope Leo XIV", "Pope", "Catholic Church", "2025-05-08", source="vatican.va"),
    # International organizations
    _fact("António Guterres", "Secretary-General", "United Nations", "2017-01-01", source="un.org"),
    _fact("Tedros Adhanom Ghebreyesus", "Director-General", "World Health Organization", "2017-07-01", source="who.int"),
    _fact("Ursula von der Leyen", "President", "European Commission", "2019-12-01", source="ec.europa.eu"),
    _fact("Christine Lagarde", "President", "European Central Bank", "2019-11-01", source="ecb.europa.eu"),
    _fact("Mark Rutte", "Secretary General", "NATO", "2024-10-01", source="nato.int"),
    _fact("Jens Stoltenberg", "Secretary General", "NATO", "2014-10-01", "2024-10-01", "nato.int"),
    _fact("Kristalina Georgieva", "Managing Director", "International Monetary Fund", "2019-10-01", source="imf.org"),
)
