# pagecms/catalog.py
"""
Default section-type catalog seeded by `flask sections seed-types`.

Schemas use the `properties` / `required` / `items_schema` spelling; see
pagecms.domain.invariants.content for what the validator accepts.
"""

ALL_PAGES = ["home", "about", "services", "service", "projects", "project", "contact"]
LANDING_PAGES = ["home", "about", "service", "project"]

_ITEM_LIST = {
    "title": "string",
    "description": "string",
    "icon": "string",
}


DEFAULT_SECTION_TYPES = [
    {
        "slug": "hero",
        "name": "Hero",
        "description": "Headline banner with a call to action and optional background image",
        "icon": "Sparkles",
        "allowed_pages": ALL_PAGES,
        "schema": {
            "properties": {
                "headline": "string",
                "subtitle": "string",
                "cta_text": "string",
                "cta_link": "string",
                "background_image": "string",
            },
            "required": ["headline"],
        },
    },
    {
        "slug": "features",
        "name": "Features",
        "description": "Grid of feature cards",
        "icon": "LayoutGrid",
        "allowed_pages": LANDING_PAGES + ["services"],
        "schema": {"items_schema": _ITEM_LIST, "properties": {"columns": "integer"}},
    },
    {
        "slug": "process",
        "name": "Process",
        "description": "Numbered steps describing how the work gets done",
        "icon": "ListOrdered",
        "allowed_pages": LANDING_PAGES,
        "schema": {"items_schema": {"step": "integer", "title": "string", "description": "string"}},
    },
    {
        "slug": "testimonials",
        "name": "Testimonials",
        "description": "Client quotes",
        "icon": "Quote",
        "allowed_pages": ["home", "about", "service", "project"],
        "schema": {
            "items_schema": {
                "quote": "string",
                "author": "string",
                "role": "string",
                "company": "string",
                "avatar": "string",
                "rating": "number",
            },
        },
    },
    {
        "slug": "stats",
        "name": "Stats",
        "description": "Headline numbers with labels",
        "icon": "BarChart3",
        "allowed_pages": ["home", "about", "service", "project"],
        "schema": {"items_schema": {"value": "string", "label": "string", "suffix": "string"}},
    },
    {
        "slug": "faq",
        "name": "FAQ",
        "description": "Questions and answers",
        "icon": "HelpCircle",
        "allowed_pages": ALL_PAGES,
        "schema": {"items_schema": {"question": "string", "answer": "string"}},
    },
    {
        "slug": "cta",
        "name": "Call to Action",
        "description": "Closing banner with primary and secondary buttons",
        "icon": "MousePointerClick",
        "allowed_pages": ALL_PAGES,
        "schema": {
            "properties": {
                "headline": "string",
                "description": "string",
                "cta_text": "string",
                "cta_link": "string",
                "secondary_cta_text": "string",
                "secondary_cta_link": "string",
            },
        },
    },
    {
        "slug": "gallery",
        "name": "Gallery",
        "description": "Image grid",
        "icon": "Images",
        "allowed_pages": ["home", "about", "project", "projects"],
        "schema": {
            "items_schema": {"image": "string", "alt": "string", "caption": "string"},
            "properties": {"columns": "integer"},
        },
    },
    {
        "slug": "team",
        "name": "Team",
        "description": "People cards",
        "icon": "Users",
        "allowed_pages": ["about", "home"],
        "schema": {
            "items_schema": {"name": "string", "role": "string", "bio": "string", "photo": "string"},
        },
    },
    {
        "slug": "pricing",
        "name": "Pricing",
        "description": "Plan comparison",
        "icon": "CreditCard",
        "allowed_pages": ["home", "service", "services"],
        "schema": {
            "items_schema": {
                "name": "string",
                "price": "string",
                "period": "string",
                "features": "array",
                "highlighted": "boolean",
                "cta_text": "string",
                "cta_link": "string",
            },
        },
    },
    {
        "slug": "form",
        "name": "Form",
        "description": "Configurable contact or lead form",
        "icon": "FileText",
        "allowed_pages": ALL_PAGES,
        "schema": {
            "properties": {
                "fields": "array",
                "submit_text": "string",
                "success_message": "string",
                "form_type": "string",
            },
            "required": ["fields"],
        },
    },
    {
        "slug": "image-text",
        "name": "Image & Text",
        "description": "Image beside a block of copy",
        "icon": "PanelLeft",
        "allowed_pages": LANDING_PAGES,
        "schema": {
            "properties": {
                "image": "string",
                "image_alt": "string",
                "body": "string",
                "image_position": "string",
            },
        },
    },
    {
        "slug": "video",
        "name": "Video",
        "description": "Embedded video",
        "icon": "PlayCircle",
        "allowed_pages": LANDING_PAGES,
        "schema": {
            "properties": {"video_url": "string", "poster": "string", "autoplay": "boolean"},
            "required": ["video_url"],
        },
    },
    {
        "slug": "logo-cloud",
        "name": "Logo Cloud",
        "description": "Client or partner logos",
        "icon": "Building2",
        "allowed_pages": ["home", "about", "service"],
        "schema": {"items_schema": {"name": "string", "logo": "string", "url": "string"}},
    },
    {
        "slug": "newsletter",
        "name": "Newsletter",
        "description": "Email signup strip",
        "icon": "Mail",
        "allowed_pages": ["home", "about"],
        "schema": {
            "properties": {"headline": "string", "description": "string", "button_text": "string"},
        },
    },
    {
        "slug": "contact-info",
        "name": "Contact Info",
        "description": "Address, phone and email details",
        "icon": "MapPin",
        "allowed_pages": ["contact"],
        "schema": {
            "properties": {
                "email": "string",
                "phone": "string",
                "address": "string",
                "hours": "string",
                "map_embed_url": "string",
            },
        },
    },
    {
        "slug": "divider",
        "name": "Divider",
        "description": "Visual spacer between sections",
        "icon": "Minus",
        "allowed_pages": ALL_PAGES,
        "schema": {"properties": {"style": "string", "spacing": "string"}},
    },
]
