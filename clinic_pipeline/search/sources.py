"""Known hockey organization pages scraped directly on every search."""

from typing import Optional

from pydantic import BaseModel

from clinic_pipeline.normalizers.location import region_code

INTERNATIONAL = "INT"

# Generic platforms never followed during link discovery
SKIP_DOMAINS = [
    "google.com", "bing.com", "facebook.com", "twitter.com", "instagram.com",
    "youtube.com", "linkedin.com", "wikipedia.org", "amazon.com", "reddit.com",
    "eventbrite.com", "active.com",
]


class KnownSource(BaseModel):
    name: str
    url: str
    region: str  # ISO-2 country code, or INT

    class Config:
        extra = "ignore"


def _source(name: str, url: str, region: str) -> KnownSource:
    return KnownSource(name=name, url=url, region=region)


KNOWN_SOURCES: list[KnownSource] = [
    # National federations
    _source("USA Hockey Camps", "https://www.usahockey.com/camps", "US"),
    _source("USA Hockey Events", "https://www.usahockey.com/events", "US"),
    _source("USA Hockey Player Development", "https://www.usahockey.com/playerdevelopment", "US"),
    _source("Hockey Canada Programs", "https://www.hockeycanada.ca/en-ca/hockey-programs/players/develop", "CA"),
    _source("Hockey Canada Camps", "https://www.hockeycanada.ca/en-ca/hockey-programs/players/camps", "CA"),
    _source("IIHF Events", "https://www.iihf.hockey/en/events", "INT"),
    _source("IIHF Development", "https://www.iihf.hockey/en/development", "INT"),
    _source("Swedish Hockey Schools", "https://www.swehockey.se/for-spelare/hockeyskolor/", "SE"),
    _source("Finnish Hockey Association", "https://www.leijonat.fi/index.php/pelaajalle", "FI"),
    _source("Czech Hockey", "https://www.ceskyhokej.cz/mladez", "CZ"),
    _source("Swiss Hockey", "https://www.sihf.ch/en/game-center/development/", "CH"),
    _source("German Hockey (DEB)", "https://www.deb-online.de/nachwuchs/", "DE"),
    _source("Norwegian Hockey", "https://www.hockey.no/aktivitet/hockeyskole", "NO"),
    _source("Danish Hockey", "https://www.ishockey.dk/ungdom/", "DK"),
    _source("Austrian Hockey", "https://www.eishockey.at/nachwuchs/", "AT"),
    _source("Slovak Hockey", "https://www.hfrba.sk/", "SK"),
    _source("Russia Hockey (FHR)", "https://fhr.ru/hockey_development/", "RU"),
    _source("Ice Hockey UK", "https://www.icehockeyuk.co.uk/development/", "GB"),
    _source("France Hockey (FFHG)", "https://www.hockeyfrance.com/ecoles-de-hockey", "FR"),
    _source("Japan Hockey (JIHF)", "https://www.jihf.or.jp/", "JP"),
    _source("Korea Hockey", "https://www.kiha.or.kr/", "KR"),
    _source("China Hockey", "https://www.chinaiha.com/", "CN"),
    _source("Australia Hockey (IHFA)", "https://www.ihfa.asn.au/", "AU"),
    _source("Latvia Hockey", "https://www.lhf.lv/", "LV"),
    _source("Poland Hockey (PZHL)", "https://www.pzhl.org.pl/", "PL"),
    _source("Italy Hockey (FISG)", "https://www.fisg.it/", "IT"),
    _source("Kazakhstan Hockey", "https://www.kfh.kz/", "KZ"),
    _source("Hungary Hockey", "https://www.icehockey.hu/", "HU"),
    # US state associations
    _source("Massachusetts Hockey", "https://www.mahockey.org/camps", "US"),
    _source("Minnesota Hockey", "https://www.minnesotahockey.org/camps", "US"),
    _source("Michigan (MAHA)", "https://www.maha.org/camps", "US"),
    _source("New York Hockey", "https://www.nyhockey.org/programs", "US"),
    _source("Connecticut Hockey", "https://www.chcice.org/programs", "US"),
    _source("New Jersey Youth Hockey", "https://www.njyhl.com/page/show/2898060-camps-clinics", "US"),
    _source("Pennsylvania Hockey", "https://www.pahockey.com/programs", "US"),
    _source("Colorado Hockey", "https://www.coloradohockey.org/programs", "US"),
    _source("Ohio Hockey", "https://www.ohiohockey.org/programs", "US"),
    _source("California Hockey", "https://www.cahockey.org/programs", "US"),
    _source("Washington Hockey", "https://www.wahockey.org/programs", "US"),
    _source("Wisconsin Hockey", "https://www.waha.org/programs", "US"),
    _source("Alaska Hockey", "https://www.alaskahockey.org/programs", "US"),
    _source("North Dakota Hockey", "https://www.ndaha.com/programs", "US"),
    _source("Texas Hockey", "https://www.tahockey.org/programs", "US"),
    _source("Florida Hockey", "https://www.fahockey.org/programs", "US"),
    _source("Arizona Hockey", "https://www.azhockey.org/programs", "US"),
    _source("Missouri Hockey", "https://www.moha.org/programs", "US"),
    # Canadian provincial
    _source("Ontario Hockey Federation", "https://www.ohf.on.ca/programs", "CA"),
    _source("Hockey Alberta", "https://www.hockeyalberta.ca/programs", "CA"),
    _source("BC Hockey", "https://www.bchockey.net/Programs.aspx", "CA"),
    _source("Hockey Quebec", "https://www.hockey.qc.ca/fr/programmes.html", "CA"),
    _source("Hockey Manitoba", "https://www.hockeymanitoba.ca/programs", "CA"),
    _source("Hockey Saskatchewan", "https://www.sha.sk.ca/programs", "CA"),
    _source("Hockey Nova Scotia", "https://www.hockeynovascotia.ca/programs", "CA"),
    _source("Hockey New Brunswick", "https://www.hnb.ca/programs", "CA"),
    # Camp organizations
    _source("Pro Ambitions Hockey", "https://www.proambitions.com/", "US"),
    _source("Laura Stamm Power Skating", "https://www.laurastamm.com/", "US"),
    _source("Bauer Hockey Camps", "https://www.bauer.com/en-US/hockey-camps/", "INT"),
    _source("CCM Hockey Camps", "https://www.ccmhockey.com/en/camps", "INT"),
    _source("Total Package Hockey", "https://www.totalpackagehockey.com/", "US"),
    _source("Planet Hockey", "https://www.planethockey.com/", "US"),
    _source("Northeast Elite Hockey", "https://www.northeastelitehockey.com/", "US"),
    _source("Hockey Opportunity Camp", "https://www.hockeyopportunity.com/", "US"),
    _source("IMG Academy Hockey", "https://www.imgacademy.com/sports/hockey", "US"),
    _source("Okanagan Hockey Academy", "https://www.okanaganhockey.com/", "CA"),
    _source("Pursuit of Excellence", "https://www.poehockey.com/", "CA"),
    _source("Banff Hockey Academy", "https://www.banffhockeyacademy.com/", "CA"),
    _source("Shattuck St Marys Hockey", "https://www.shattuck.org/athletics/hockey", "US"),
    _source("Ontario Hockey Academy", "https://www.ontariohockeyacademy.com/", "CA"),
    _source("International Hockey Camp", "https://www.internationalhockeycamp.com/", "INT"),
    _source("American Hockey Camps", "https://www.americanhockeycamps.com/", "US"),
    _source("World Pro Hockey Camp", "https://www.worldprohockeycamp.com/", "CA"),
    _source("Scandinavian Hockey Camp", "https://www.scandinavianhockeycamp.com/", "SE"),
    _source("European Hockey Camp", "https://www.europeanhockeycamp.com/", "INT"),
    # Directories
    _source("MySummerCamps Hockey", "https://www.mysummercamps.com/camps/Sports_Camps/Hockey_Camps/", "US"),
    _source("CampPage Hockey", "https://www.camppage.com/hockey-camps", "US"),
    _source("KidsCamps Hockey", "https://www.kidscamps.com/sports/hockey_camps.html", "US"),
    _source("HockeyDB Camps", "https://www.hockeydb.com/camps/", "INT"),
]


def prioritize_sources_by_location(
    sources: list[KnownSource],
    user_country: Optional[str] = None,
    user_state: Optional[str] = None,
) -> list[KnownSource]:
    """User's region first, then international sources, then the rest.

    The sort is stable, so table order is kept within each bucket.
    """
    if not user_country and not user_state:
        return list(sources)

    local = region_code(user_country)

    def bucket(source: KnownSource) -> int:
        if local and source.region == local:
            return 0
        if source.region == INTERNATIONAL:
            return 1
        return 2

    return sorted(sources, key=bucket)


def filter_by_region(sources: list[KnownSource], region: Optional[str]) -> list[KnownSource]:
    """Sources for one region code (case-insensitive); all when region is None."""
    if not region:
        return list(sources)
    return [s for s in sources if s.region == region.upper()]
