from .browser import BrowserbaseClient, BrowserSession
from .linkedin_profile import LinkedInProfileScraper, is_auth_wall, parse_skills

__all__ = ["BrowserbaseClient", "BrowserSession", "LinkedInProfileScraper", "is_auth_wall", "parse_skills"]
