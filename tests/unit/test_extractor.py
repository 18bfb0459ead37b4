"""Tests for HTML clinic extraction."""

from clinic_pipeline.extractors import extract_clinics_from_html
from clinic_pipeline.extractors.dom import PageNode
from clinic_pipeline.extractors.heuristics import PageContext
from clinic_pipeline.extractors.listings import map_table_columns
from clinic_pipeline.extractors.pipeline import deduplicate_page_results, enrich_candidates
from clinic_pipeline.extractors.platforms import extract_cms_patterns
from clinic_pipeline.models import RawClinicData
from clinic_pipeline.normalizers.canonical import canonicalize

PAGE_URL = "https://rink.example.com/programs"


class TestStructuredData:
    """JSON-LD and microdata events."""

    def test_json_ld_event(self, json_ld_html: str):
        results = extract_clinics_from_html(json_ld_html, PAGE_URL, "Example Rink")

        assert len(results) == 1
        camp = results[0]
        assert camp.name == "Youth Hockey Skills Camp"
        assert camp.extraction_method == "json-ld"
        assert camp.confidence >= 0.9
        assert camp.start_date == "2026-07-14"
        assert camp.end_date == "2026-07-18"
        assert camp.price_amount == 350.0
        assert camp.currency == "USD"
        assert camp.venue == "Warrior Ice Arena"
        assert camp.city == "Boston"
        assert camp.source == "Example Rink"

    def test_json_ld_to_canonical(self, json_ld_html: str, today):
        clinics = canonicalize(extract_clinics_from_html(json_ld_html, PAGE_URL, "Example Rink"), today=today)

        assert len(clinics) == 1
        clinic = clinics[0]
        assert clinic.dates.start == "2026-07-14"
        assert clinic.dates.end == "2026-07-18"
        assert clinic.duration == "5 days"
        assert clinic.price.amount == 350.0
        assert clinic.price.currency == "USD"
        assert clinic.location.country == "United States"
        assert clinic.location.country_code == "US"
        assert clinic.featured

    def test_json_ld_graph_and_non_events(self):
        html = """
        <script type="application/ld+json">
        {"@graph": [
          {"@type": "Organization", "name": "Rink Rats Hockey"},
          {"@type": "Event", "name": "Spring Hockey Clinic", "startDate": "2026-04-04"}
        ]}
        </script>
        """
        results = extract_clinics_from_html(html, PAGE_URL, "Example Rink")
        assert [r.name for r in results] == ["Spring Hockey Clinic"]

    def test_non_hockey_event_skipped(self):
        html = """
        <script type="application/ld+json">
        {"@type": "Event", "name": "Summer Soccer Camp", "startDate": "2026-07-01"}
        </script>
        """
        assert extract_clinics_from_html(html, PAGE_URL, "Example Rink") == []

    def test_microdata_event(self):
        html = """
        <html><body>
        <div itemscope itemtype="https://schema.org/SportsEvent">
          <span itemprop="name">Girls Hockey Development Day</span>
          <time itemprop="startDate" datetime="2026-08-22">Aug 22</time>
          <div itemprop="location" itemscope itemtype="https://schema.org/Place">
            <span itemprop="name">Edina Community Ice Arena</span>
            <div itemprop="address" itemscope itemtype="https://schema.org/PostalAddress">
              <span itemprop="addressLocality">Edina</span>
              <span itemprop="addressRegion">MN</span>
            </div>
          </div>
        </div>
        </body></html>
        """
        results = extract_clinics_from_html(html, PAGE_URL, "Example Rink")

        assert len(results) == 1
        event = results[0]
        assert event.extraction_method == "microdata"
        assert event.name == "Girls Hockey Development Day"
        assert event.start_date == "2026-08-22"
        assert event.venue == "Edina Community Ice Arena"
        assert event.city == "Edina"
        assert event.state == "MN"


class TestMetaTags:

    def test_event_page(self):
        html = """
        <html><head>
          <meta property="og:title" content="Spring Hockey Camp">
          <meta property="og:type" content="event">
        </head><body>
          <p>Join us April 6-10, 2026 at Centennial Ice Arena. $300 per player.</p>
        </body></html>
        """
        results = extract_clinics_from_html(html, PAGE_URL, "Example Rink")

        assert len(results) == 1
        page = results[0]
        assert page.extraction_method == "meta"
        assert page.confidence == 0.65
        assert page.date_text == "April 6-10, 2026"
        assert page.venue == "Centennial Ice Arena"
        assert page.price == "$300"

    def test_suppressed_by_structured_data(self, json_ld_html: str):
        results = extract_clinics_from_html(json_ld_html, PAGE_URL, "Example Rink")
        assert all(r.extraction_method != "meta" for r in results)


class TestListings:
    """Cards and tables."""

    def test_cards(self):
        html = """
        <html><head><title>Programs</title></head><body>
        <div class="camps">
          <div class="camp-card">
            <h3>Mite Power Skating Clinic</h3>
            <p>Edge work and puck control for beginners, ages 6-8</p>
            <span class="camp-date">July 6-10, 2026</span>
            <span class="camp-price">$275</span>
            <a href="/register/mite">Register</a>
          </div>
          <div class="camp-card">
            <h3>Bantam Checking Clinic</h3>
            <p>Body checking fundamentals for bantam hockey players</p>
          </div>
          <div class="camp-card">
            <h3>Figure Skating Showcase</h3>
            <p>Spins and jumps for figure skaters</p>
          </div>
        </div>
        </body></html>
        """
        results = extract_clinics_from_html(html, PAGE_URL, "Example Rink")

        assert [r.name for r in results] == ["Mite Power Skating Clinic", "Bantam Checking Clinic"]
        mite = results[0]
        assert mite.extraction_method == "card"
        assert mite.confidence == 0.72
        assert mite.date_text == "July 6-10, 2026"
        assert mite.price == "$275"
        assert mite.registration_url == "https://rink.example.com/register/mite"
        assert mite.description == "Edge work and puck control for beginners, ages 6-8"

    def test_table(self):
        html = """
        <html><head><title>Schedule</title></head><body>
        <table>
          <thead><tr><th>Program</th><th>Dates</th><th>Ages</th><th>Fee</th></tr></thead>
          <tbody>
            <tr><td>Goalie Clinic</td><td>Aug 3-7, 2026</td><td>U12</td><td>$400</td></tr>
            <tr><td>Hockey Shooting Clinic</td><td>Aug 10-14, 2026</td><td>U14</td><td>$380</td></tr>
          </tbody>
        </table>
        </body></html>
        """
        results = extract_clinics_from_html(html, PAGE_URL, "Example Rink")

        assert [r.name for r in results] == ["Goalie Clinic", "Hockey Shooting Clinic"]
        goalie = results[0]
        assert goalie.extraction_method == "table"
        assert goalie.date_text == "Aug 3-7, 2026"
        assert goalie.age_range == "U12"
        assert goalie.price == "$400"

    def test_column_mapping(self):
        columns = map_table_columns(["program", "dates", "ages", "fee", "rink", "register"])
        assert columns == {
            "name": 0,
            "date": 1,
            "age": 2,
            "price": 3,
            "location": 4,
            "link": 5,
        }


class TestCmsPatterns:

    def test_events_calendar(self):
        html = """
        <div class="tribe-events-calendar-list__event">
          <h3 class="tribe-events-calendar-list__event-title">
            <a href="/event/hockey-skills-night">Hockey Skills Night</a>
          </h3>
          <span class="tribe-event-date-start">March 12, 2026</span>
          <span class="tribe-events-c-small-cta__price">$25</span>
        </div>
        """
        results = extract_clinics_from_html(html, PAGE_URL, "Example Rink")

        assert len(results) == 1
        night = results[0]
        assert night.extraction_method == "cms:the-events-calendar"
        assert night.confidence == 0.78
        assert night.name == "Hockey Skills Night"
        assert night.date_text == "March 12, 2026"
        assert night.price == "$25"
        assert night.source_url == "https://rink.example.com/event/hockey-skills-night"

    def test_blog_post_needs_registration_or_date(self):
        news = PageNode.parse("""
        <article class="post"><h2>Hockey team wins again</h2><p>Great hockey game last night.</p></article>
        """)
        announcement = PageNode.parse("""
        <article class="post"><h2>Spring hockey clinic</h2><p>Register now, spots available.</p></article>
        """)

        assert extract_cms_patterns(news, PAGE_URL, "Example Rink") == []
        results = extract_cms_patterns(announcement, PAGE_URL, "Example Rink")
        assert [r.name for r in results] == ["Spring hockey clinic"]
        assert results[0].extraction_method == "cms:blog-post"


class TestPageNode:

    def test_find_all_by_attributes(self):
        doc = PageNode.parse("""
        <html><head>
          <script type="application/ld+json">{"@type": "Event"}</script>
          <script type="text/javascript">var x = 1;</script>
          <script type="application/ld+json">{"@type": "Organization"}</script>
        </head><body><p>One</p><div><p>Two</p></div></body></html>
        """)

        scripts = doc.find_all("script", type="application/ld+json")
        assert [s.raw_text() for s in scripts] == ['{"@type": "Event"}', '{"@type": "Organization"}']
        assert [p.text() for p in doc.find_all("p")] == ["One", "Two"]


class TestGenericAndRobustness:

    def test_generic_fallback(self):
        html = """
        <html><head>
          <script type="application/ld+json">{not valid json</script>
        </head><body>
          <main>
            <h1>Spring Hockey Clinic</h1>
            <p>Skills clinic on April 4, 2026. Contact coach@rinkrats.org to sign up.</p>
          </main>
        </body></html>
        """
        results = extract_clinics_from_html(html, PAGE_URL, "Example Rink")

        assert len(results) == 1
        page = results[0]
        assert page.extraction_method == "generic"
        assert page.confidence == 0.5
        assert page.date_text == "April 4, 2026"
        assert page.contact_email == "coach@rinkrats.org"

    def test_malformed_html_never_raises(self):
        assert isinstance(extract_clinics_from_html("<div><p>Hockey <b>camp", PAGE_URL, "x"), list)
        assert extract_clinics_from_html("", PAGE_URL, "x") == []
        assert extract_clinics_from_html(None, PAGE_URL, "x") == []

    def test_non_hockey_page(self):
        html = "<html><head><title>Bake sale</title></head><body><h1>Bake sale</h1></body></html>"
        assert extract_clinics_from_html(html, PAGE_URL, "x") == []


class TestPageDeduplication:

    def test_higher_confidence_wins_and_keeps_fields(self):
        low = RawClinicData(
            source="x",
            name="Summer Hockey Camp",
            contact_email="info@camp.org",
            confidence=0.5,
        )
        high = RawClinicData(
            source="x",
            name="Summer  Hockey Camp!",
            date_text="July 6-10, 2026",
            confidence=0.9,
        )
        results = deduplicate_page_results([low, high])

        assert len(results) == 1
        assert results[0].confidence == 0.9
        assert results[0].date_text == "July 6-10, 2026"
        assert results[0].contact_email == "info@camp.org"

    def test_nameless_dropped(self):
        assert deduplicate_page_results([RawClinicData(source="x", confidence=0.9)]) == []


class TestEnrichment:
    """Page-level fallbacks fill only what a candidate lacks."""

    PAGE = """
    <html><head>
      <title>Programs</title>
      <meta property="og:image" content="/img/summer-camp.jpg">
    </head><body>
      <main>
        <p>Our youth hockey camps run every summer at the Rink Rats arena.</p>
        {card}
        <div class="coach-bio"><h4>Jane Doe</h4><p>Former NCAA goaltender</p></div>
        <p>Questions? Email <a href="mailto:camps@rinkrats.org">camps@rinkrats.org</a> or call (617) 555-0142.</p>
        <a href="/register">Register now</a>
      </main>
    </body></html>
    """

    def extract(self, card: str) -> RawClinicData:
        results = extract_clinics_from_html(self.PAGE.replace("{card}", card), PAGE_URL, "Rink Rats")
        return next(r for r in results if r.extraction_method == "card")

    def test_page_fields_fill_card(self):
        clinic = self.extract(
            '<div class="camp-card"><h3>Summer Hockey Skills Camp</h3>'
            '<span class="camp-date">July 14-18, 2026</span></div>'
        )

        assert clinic.description == "Our youth hockey camps run every summer at the Rink Rats arena."
        assert clinic.coaches == ["Jane Doe"]
        assert clinic.contact_email == "camps@rinkrats.org"
        assert clinic.contact_phone == "(617) 555-0142"
        assert clinic.image_url == "https://rink.example.com/img/summer-camp.jpg"
        # A card without a link registers on the page it was found on
        assert clinic.registration_url == PAGE_URL

    def test_card_values_win(self):
        clinic = self.extract(
            '<div class="camp-card"><h3>Goalie Hockey Camp</h3>'
            '<img src="/img/goalie.jpg"><a href="/register/goalie">Details</a></div>'
        )

        assert clinic.registration_url == "https://rink.example.com/register/goalie"
        assert clinic.image_url == "https://rink.example.com/img/goalie.jpg"
        assert clinic.contact_email == "camps@rinkrats.org"

    def test_fills_missing_only(self):
        context = PageContext(
            emails=["camps@rinkrats.org"],
            registration_url="https://rink.example.com/register",
            hero_image="https://rink.example.com/img/hero.jpg",
            description="Summer programs for all ages.",
        )
        bare = RawClinicData(source="Rink Rats", source_url=PAGE_URL, name="Learn to Skate Hockey")
        own = RawClinicData(
            source="Rink Rats",
            source_url=PAGE_URL,
            name="Elite Hockey Camp",
            registration_url="https://register.example.com/elite",
            image_url="https://rink.example.com/img/elite.jpg",
            description="Invite-only skills camp.",
        )

        enrich_candidates([bare, own], context)

        assert bare.registration_url == "https://rink.example.com/register"
        assert bare.image_url == "https://rink.example.com/img/hero.jpg"
        assert bare.description == "Summer programs for all ages."
        assert bare.contact_email == "camps@rinkrats.org"
        assert own.registration_url == "https://register.example.com/elite"
        assert own.image_url == "https://rink.example.com/img/elite.jpg"
        assert own.description == "Invite-only skills camp."
        assert own.contact_email == "camps@rinkrats.org"
