# Demo Profile Catalog
# Canned property datasets for every demo persona, with dates relative to today

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

import pandas as pd

from shared.logging import get_logger
from shared.profiles import DemoProfile

logger = get_logger(__name__)

SECTIONS = (
    "properties",
    "systems",
    "tasks",
    "inspections",
    "maintenance_history",
    "preserve_schedules",
    "upgrade_projects",
)


class _Dates:
    """Date helpers anchored on one 'today' so a whole dataset agrees on it"""

    def __init__(self, today):
        self.today = today

    def ago(self, days):
        return (self.today - timedelta(days=days)).isoformat()

    def ahead(self, days):
        return (self.today + timedelta(days=days)).isoformat()

    def now(self):
        return self.today.isoformat()


@dataclass(frozen=True)
class DemoDataset:
    """The canned entity graph rendered while a profile is active"""

    profile: DemoProfile
    property: dict
    systems: tuple = ()
    tasks: tuple = ()
    inspections: tuple = ()
    maintenance_history: tuple = ()
    preserve_schedules: tuple = ()
    upgrade_projects: tuple = ()
    properties: tuple = ()
    portfolio_metrics: dict = field(default_factory=dict)
    stats: dict = field(default_factory=dict)
    generated_on: Optional[date] = None

    @property
    def health_score(self):
        return self.property.get("health_score")

    @property
    def total_units(self):
        if self.properties:
            return sum(p.get("door_count", 1) for p in self.properties)
        return self.property.get("door_count", 1)

    def frame(self, section):
        """DataFrame view of one list section for tables and charts"""
        if section not in SECTIONS:
            raise KeyError(f"Unknown dataset section: {section}")
        rows = getattr(self, section)
        return pd.DataFrame(list(rows))


# ======================================================================================
# Homeowner - 2847 Maple Grove Lane, fully documented
# ======================================================================================

def _homeowner(d):
    property_id = "demo-homeowner-001"
    return DemoDataset(
        profile=DemoProfile.HOMEOWNER,
        property={
            "id": property_id,
            "address": "2847 Maple Grove Lane",
            "city": "Vancouver", "state": "WA", "zip_code": "98661",
            "property_type": "Single-Family Home",
            "year_built": 2015, "square_footage": 2400,
            "bedrooms": 4, "bathrooms": 2.5, "door_count": 1,
            "is_demo": True, "demo_type": "homeowner",
            "baseline_completion": 100,
            "health_score": 78,
            "last_inspection_date": d.ago(4),
            "total_maintenance_spent": 3200,
            "estimated_disasters_prevented": 7200,
        },
        systems=(
            {"id": "demo-h-sys-001", "system_type": "HVAC System", "nickname": "Main Heat Pump",
             "brand_model": "Lennox XC25 Heat Pump", "installation_year": 2017, "condition": "Good",
             "last_service_date": d.ago(190), "estimated_lifespan_years": 15, "replacement_cost_estimate": 8500},
            {"id": "demo-h-sys-002", "system_type": "Water & Sewer/Septic", "nickname": "Water Heater",
             "brand_model": "Rheem 50-Gal Gas", "installation_year": 2015, "condition": "Fair",
             "last_service_date": d.ago(400), "estimated_lifespan_years": 12, "replacement_cost_estimate": 1800},
            {"id": "demo-h-sys-003", "system_type": "Roof System", "nickname": "Main Roof",
             "brand_model": "CertainTeed Landmark", "installation_year": 2015, "condition": "Good",
             "last_service_date": d.ago(30), "estimated_lifespan_years": 30, "replacement_cost_estimate": 12000},
            {"id": "demo-h-sys-004", "system_type": "Gutters", "nickname": "Gutters & Downspouts",
             "brand_model": "Seamless Aluminum", "installation_year": 2015, "condition": "Fair",
             "last_service_date": d.ago(320), "estimated_lifespan_years": 20, "replacement_cost_estimate": 2400},
            {"id": "demo-h-sys-005", "system_type": "Smoke Detector", "nickname": "Smoke Detectors",
             "brand_model": "Kidde Hardwired", "installation_year": 2015, "condition": "Urgent",
             "last_service_date": None, "estimated_lifespan_years": 10, "replacement_cost_estimate": 300},
        ),
        tasks=(
            {"id": "demo-h-task-001", "title": "Replace Smoke Detectors", "priority": "Urgent",
             "current_fix_cost": 300, "delayed_fix_cost": 300, "status": "Identified"},
            {"id": "demo-h-task-002", "title": "Clean Gutters", "priority": "High",
             "current_fix_cost": 150, "delayed_fix_cost": 4500, "status": "Identified"},
            {"id": "demo-h-task-003", "title": "Flush Water Heater", "priority": "High",
             "current_fix_cost": 120, "delayed_fix_cost": 1800, "status": "Scheduled",
             "scheduled_date": d.ahead(6)},
            {"id": "demo-h-task-004", "title": "Fall HVAC Service", "priority": "Medium",
             "current_fix_cost": 165, "delayed_fix_cost": 2500, "status": "Scheduled",
             "scheduled_date": d.now()},
        ),
        inspections=(
            {"id": "demo-h-insp-001", "inspection_type": "Fall Inspection", "season": "Fall",
             "inspection_date": d.ago(4), "status": "Completed", "issues_found": 4},
            {"id": "demo-h-insp-002", "inspection_type": "Spring Inspection", "season": "Spring",
             "inspection_date": d.ago(186), "status": "Completed", "issues_found": 2},
        ),
        maintenance_history=(
            {"id": "demo-h-hist-001", "date": d.ago(190), "title": "Spring HVAC Service",
             "cost": 165, "prevented_cost": 800},
            {"id": "demo-h-hist-002", "date": d.ago(120), "title": "Bathroom Caulk Refresh",
             "cost": 35, "prevented_cost": 2400},
            {"id": "demo-h-hist-003", "date": d.ago(45), "title": "Dryer Vent Cleaning",
             "cost": 90, "prevented_cost": 4000},
        ),
        preserve_schedules=(
            {"id": "demo-h-pres-001", "system": "HVAC System", "intervention": "Coil cleaning + refrigerant check",
             "cost": 350, "life_extension_years": 4, "roi_multiple": 5.2},
            {"id": "demo-h-pres-002", "system": "Water Heater", "intervention": "Anode rod replacement",
             "cost": 180, "life_extension_years": 3, "roi_multiple": 4.1},
        ),
        upgrade_projects=(
            {"id": "demo-h-upg-001", "title": "Guest Bathroom Remodel", "status": "In Progress",
             "budget": 8500, "spent": 5200, "roi_percent": 70, "start_date": d.ago(21)},
        ),
        portfolio_metrics={
            "total_properties": 1, "total_units": 1,
            "current_property_value": 550000, "outstanding_mortgage": 300000,
            "current_equity": 250000, "projected_equity_10yr": 520000,
            "recommendation": "Hold",
        },
        stats={"total_systems": 16, "systems_good": 9, "systems_flagged": 6, "systems_urgent": 1,
               "total_tasks": 8, "health_score": 78},
    )


# ======================================================================================
# Struggling - 1847 Riverside Drive, reactive owner, score 62
# ======================================================================================

def _struggling(d):
    property_id = "demo-struggling-001"
    return DemoDataset(
        profile=DemoProfile.STRUGGLING,
        property={
            "id": property_id,
            "address": "1847 Riverside Drive",
            "city": "Vancouver", "state": "WA", "zip_code": "98661",
            "property_type": "Single-Family Home",
            "year_built": 2010, "square_footage": 1850,
            "bedrooms": 3, "bathrooms": 2, "door_count": 1,
            "is_demo": True, "demo_type": "struggling",
            "baseline_completion": 20,
            "health_score": 62,
            "last_inspection_date": None,
            "current_value": 340000, "mortgage_balance": 198000,
            "total_maintenance_spent": 0,
            "estimated_disasters_prevented": 0,
            "certification_level": None,
            "breakdown": {"condition": 26, "maintenance": 18, "improvement": 18},
        },
        systems=(
            {"id": "demo-s-sys-001", "system_type": "HVAC System", "nickname": "Main HVAC",
             "brand_model": "Carrier 3-Ton Heat Pump", "installation_year": 2007, "condition": "Fair",
             "last_service_date": None, "estimated_lifespan_years": 15, "replacement_cost_estimate": 6500},
            {"id": "demo-s-sys-002", "system_type": "Water & Sewer/Septic", "nickname": "Water Heater",
             "brand_model": "Rheem 40-Gal Gas", "installation_year": 2009, "condition": "Fair",
             "last_service_date": None, "estimated_lifespan_years": 10, "replacement_cost_estimate": 1200},
            {"id": "demo-s-sys-003", "system_type": "Roof System", "nickname": "Main Roof",
             "brand_model": "3-Tab Asphalt Shingles", "installation_year": 2010, "condition": "Fair",
             "last_service_date": None, "estimated_lifespan_years": 20, "replacement_cost_estimate": 9000},
            {"id": "demo-s-sys-004", "system_type": "Electrical System", "nickname": "Main Panel",
             "brand_model": "150A Main Panel", "installation_year": 2010, "condition": "Poor",
             "last_service_date": None, "estimated_lifespan_years": 40, "replacement_cost_estimate": 3500},
            {"id": "demo-s-sys-005", "system_type": "CO Detector", "nickname": "Carbon Monoxide Detectors",
             "brand_model": "None", "installation_year": None, "condition": "Urgent",
             "last_service_date": None, "estimated_lifespan_years": 7, "replacement_cost_estimate": 100},
            {"id": "demo-s-sys-006", "system_type": "Smoke Detector", "nickname": "Smoke Detectors",
             "brand_model": "Battery-Powered (unknown age)", "installation_year": None, "condition": "Poor",
             "last_service_date": None, "estimated_lifespan_years": 10, "replacement_cost_estimate": 200},
        ),
        # The struggling owner has never tracked work; the visitor builds the queue
        tasks=(),
        inspections=(
            {"id": "demo-s-insp-001", "inspection_type": "First Walkthrough", "season": "Fall",
             "inspection_date": d.ago(2), "status": "Completed", "issues_found": 7,
             "critical_count": 2, "urgent_count": 2, "high_count": 3},
        ),
        maintenance_history=(
            {"id": "demo-s-hist-001", "date": d.ago(210), "title": "Emergency Plumber - Burst Hose",
             "cost": 650, "prevented_cost": 0},
        ),
        preserve_schedules=(
            {"id": "demo-s-pres-001", "system": "HVAC System", "intervention": "Deep service + capacitor",
             "cost": 850, "life_extension_years": 3, "roi_multiple": 7.6},
            {"id": "demo-s-pres-002", "system": "Water Heater", "intervention": "Flush + anode rod",
             "cost": 400, "life_extension_years": 2, "roi_multiple": 3.0},
            {"id": "demo-s-pres-003", "system": "Roof System", "intervention": "Shingle repair + gutter clean",
             "cost": 800, "life_extension_years": 3, "roi_multiple": 11.2},
        ),
        upgrade_projects=(
            {"id": "demo-s-upg-001", "title": "Install CO Detectors", "status": "Recommended",
             "budget": 100, "spent": 0, "roi_percent": None, "start_date": d.ahead(1)},
        ),
        portfolio_metrics={
            "total_properties": 1, "total_units": 1,
            "current_property_value": 340000, "outstanding_mortgage": 198000,
            "current_equity": 142000, "projected_equity_10yr": 350000,
            "recommendation": "Hold & Stabilize",
        },
        stats={"total_systems": 6, "systems_good": 0, "systems_flagged": 4, "systems_urgent": 2,
               "total_tasks": 0, "health_score": 62},
    )


# ======================================================================================
# Improving - Camas, WA, bronze certified, score 78
# ======================================================================================

def _improving(d):
    property_id = "demo-improving-001"
    return DemoDataset(
        profile=DemoProfile.IMPROVING,
        property={
            "id": property_id,
            "address": "1847 Riverside Drive",
            "city": "Camas", "state": "WA", "zip_code": "98607",
            "property_type": "Single-Family Home",
            "year_built": 2010, "square_footage": 2100,
            "bedrooms": 3, "bathrooms": 2, "door_count": 1,
            "is_demo": True, "demo_type": "improving",
            "baseline_completion": 87,
            "health_score": 78,
            "last_inspection_date": d.ago(18),
            "total_maintenance_spent": 1850,
            "estimated_disasters_prevented": 3200,
            "certification_level": "bronze",
            "breakdown": {"condition": 35, "maintenance": 28, "improvement": 15},
        },
        systems=(
            {"id": "demo-i-sys-001", "system_type": "HVAC System", "nickname": "Gas Furnace + AC",
             "brand_model": "Trane XR14", "installation_year": 2012, "condition": "Good",
             "last_service_date": d.ago(170), "estimated_lifespan_years": 18, "replacement_cost_estimate": 7800},
            {"id": "demo-i-sys-002", "system_type": "Crawlspace", "nickname": "Vapor Barrier",
             "brand_model": "6-mil Poly", "installation_year": 2010, "condition": "Poor",
             "last_service_date": None, "estimated_lifespan_years": 15, "replacement_cost_estimate": 800},
            {"id": "demo-i-sys-003", "system_type": "Roof System", "nickname": "Main Roof",
             "brand_model": "Architectural Shingles", "installation_year": 2010, "condition": "Fair",
             "last_service_date": d.ago(365), "estimated_lifespan_years": 25, "replacement_cost_estimate": 11000},
            {"id": "demo-i-sys-004", "system_type": "Water & Sewer/Septic", "nickname": "Water Heater",
             "brand_model": "AO Smith 50-Gal", "installation_year": 2016, "condition": "Good",
             "last_service_date": d.ago(300), "estimated_lifespan_years": 12, "replacement_cost_estimate": 1600},
        ),
        tasks=(
            {"id": "demo-i-task-001", "title": "Replace Crawlspace Vapor Barrier", "priority": "High",
             "current_fix_cost": 800, "delayed_fix_cost": 4000, "status": "Identified"},
            {"id": "demo-i-task-002", "title": "Add Smart Leak Detectors", "priority": "Medium",
             "current_fix_cost": 150, "delayed_fix_cost": 5000, "status": "Identified"},
            {"id": "demo-i-task-003", "title": "Fall HVAC Service", "priority": "High",
             "current_fix_cost": 150, "status": "Scheduled", "scheduled_date": d.ahead(5)},
            {"id": "demo-i-task-004", "title": "Window Seal Inspection", "priority": "Medium",
             "current_fix_cost": 50, "status": "Scheduled", "scheduled_date": d.ahead(10)},
            {"id": "demo-i-task-005", "title": "Fall Gutter Cleaning", "priority": "Medium",
             "current_fix_cost": 150, "status": "Scheduled", "scheduled_date": d.now()},
            {"id": "demo-i-task-006", "title": "Water Heater Flush", "priority": "Medium",
             "current_fix_cost": 120, "status": "Scheduled", "scheduled_date": d.ago(1)},
            {"id": "demo-i-task-007", "title": "Test Smoke Detectors", "priority": "Routine",
             "current_fix_cost": 0, "status": "Scheduled", "scheduled_date": d.now()},
        ),
        inspections=(
            {"id": "demo-i-insp-001", "inspection_type": "Fall Inspection", "season": "Fall",
             "inspection_date": d.ago(18), "status": "Completed", "issues_found": 5,
             "urgent_count": 0, "flag_count": 2},
        ),
        maintenance_history=(
            {"id": "demo-i-hist-001", "date": d.ago(170), "title": "Spring HVAC Tune-Up",
             "cost": 150, "prevented_cost": 1200},
            {"id": "demo-i-hist-002", "date": d.ago(60), "title": "Replace Toilet Flapper",
             "cost": 15, "prevented_cost": 400},
        ),
        preserve_schedules=(
            {"id": "demo-i-pres-001", "system": "HVAC System", "intervention": "Annual service plan",
             "cost": 300, "life_extension_years": 5, "roi_multiple": 6.0},
            {"id": "demo-i-pres-002", "system": "Roof System", "intervention": "Moss treatment + sealing",
             "cost": 610, "life_extension_years": 3, "roi_multiple": 4.4},
            {"id": "demo-i-pres-003", "system": "Appliances", "intervention": "Coil + seal maintenance",
             "cost": 1000, "life_extension_years": 4, "roi_multiple": 2.8},
        ),
        upgrade_projects=(
            {"id": "demo-i-upg-001", "title": "Smart Thermostat + Leak Detectors", "status": "Planned",
             "budget": 420, "spent": 0, "roi_percent": 65, "start_date": d.ahead(14)},
            {"id": "demo-i-upg-002", "title": "Crawlspace Encapsulation", "status": "Recommended",
             "budget": 3500, "spent": 0, "roi_percent": 157, "start_date": None},
        ),
        portfolio_metrics={
            "total_properties": 1, "total_units": 1,
            "current_property_value": 480000, "outstanding_mortgage": 220000,
            "current_equity": 260000, "projected_equity_10yr": 480000,
            "recommendation": "Hold",
        },
        stats={"total_systems": 11, "systems_good": 7, "systems_flagged": 3, "systems_urgent": 1,
               "total_tasks": 4, "health_score": 78},
    )


# ======================================================================================
# Excellent - gold certified, score 92
# ======================================================================================

def _excellent(d):
    property_id = "demo-excellent-001"
    return DemoDataset(
        profile=DemoProfile.EXCELLENT,
        property={
            "id": property_id,
            "address": "2847 Maple Grove Lane",
            "city": "Vancouver", "state": "WA", "zip_code": "98661",
            "property_type": "Single-Family Home",
            "year_built": 2015, "square_footage": 2400,
            "bedrooms": 4, "bathrooms": 2.5, "door_count": 1,
            "is_demo": True, "demo_type": "excellent",
            "baseline_completion": 100,
            "health_score": 92,
            "last_inspection_date": d.ago(4),
            "total_maintenance_spent": 3200,
            "estimated_disasters_prevented": 12400,
            "certification_level": "gold",
            "breakdown": {"condition": 37, "maintenance": 33, "improvement": 22},
        },
        systems=(
            {"id": "demo-e-sys-001", "system_type": "HVAC System", "nickname": "Main Heat Pump",
             "brand_model": "Lennox XC25 Heat Pump", "installation_year": 2017, "condition": "Excellent",
             "last_service_date": d.ago(9), "estimated_lifespan_years": 15, "replacement_cost_estimate": 8500},
            {"id": "demo-e-sys-002", "system_type": "Water & Sewer/Septic", "nickname": "Water Heater",
             "brand_model": "Rheem ProTerra Hybrid", "installation_year": 2020, "condition": "Excellent",
             "last_service_date": d.ago(34), "estimated_lifespan_years": 12, "replacement_cost_estimate": 2000},
            {"id": "demo-e-sys-003", "system_type": "Roof System", "nickname": "Main Roof",
             "brand_model": "CertainTeed Landmark AR", "installation_year": 2015, "condition": "Excellent",
             "last_service_date": d.ago(29), "estimated_lifespan_years": 30, "replacement_cost_estimate": 12000},
        ),
        tasks=(
            {"id": "demo-e-task-001", "title": "Winter Inspection", "priority": "Routine",
             "current_fix_cost": 0, "status": "Scheduled", "scheduled_date": d.ahead(57)},
            {"id": "demo-e-task-002", "title": "Replace HVAC Filter", "priority": "Routine",
             "current_fix_cost": 25, "status": "Scheduled", "scheduled_date": d.now()},
        ),
        inspections=(
            {"id": "demo-e-insp-001", "inspection_type": "Fall Inspection", "season": "Fall",
             "inspection_date": d.ago(4), "status": "Completed", "issues_found": 0},
            {"id": "demo-e-insp-002", "inspection_type": "Summer Inspection", "season": "Summer",
             "inspection_date": d.ago(95), "status": "Completed", "issues_found": 1},
        ),
        maintenance_history=(
            {"id": "demo-e-hist-001", "date": d.ago(9), "title": "Fall HVAC Service",
             "cost": 165, "prevented_cost": 800},
            {"id": "demo-e-hist-002", "date": d.ago(34), "title": "Water Heater Flush",
             "cost": 0, "prevented_cost": 1500},
        ),
        preserve_schedules=(
            {"id": "demo-e-pres-001", "system": "Whole Home", "intervention": "Annual preventive care plan",
             "cost": 2825, "life_extension_years": 5, "roi_multiple": 8.7},
        ),
        upgrade_projects=(
            {"id": "demo-e-upg-001", "title": "Whole-Home Surge Protection", "status": "Completed",
             "budget": 450, "spent": 450, "roi_percent": None, "start_date": d.ago(60)},
            {"id": "demo-e-upg-002", "title": "Flo Water Monitoring", "status": "Planned",
             "budget": 650, "spent": 0, "roi_percent": None, "start_date": d.ahead(30)},
        ),
        portfolio_metrics={
            "total_properties": 1, "total_units": 1,
            "current_property_value": 550000, "outstanding_mortgage": 300000,
            "current_equity": 250000, "projected_equity_10yr": 520000,
            "recommendation": "Hold",
        },
        stats={"total_systems": 16, "systems_good": 15, "systems_flagged": 1, "systems_urgent": 0,
               "total_tasks": 4, "health_score": 92},
    )


# ======================================================================================
# Investor - 3 properties, 7 doors
# ======================================================================================

def _investor(d):
    properties = (
        {"id": "demo-investor-1", "nickname": "Maple Street Duplex", "address": "1247 Maple Street",
         "city": "Vancouver", "state": "WA", "property_type": "Duplex", "door_count": 2,
         "year_built": 1998, "current_value": 340000, "mortgage_balance": 198000, "equity": 142000,
         "monthly_rent": 2400, "monthly_mortgage": 1180, "health_score": 84,
         "last_inspection_date": d.ago(35)},
        {"id": "demo-investor-2", "nickname": "Oak Ridge Single Family", "address": "3842 Oak Ridge Drive",
         "city": "Portland", "state": "OR", "property_type": "Single-Family Home", "door_count": 1,
         "year_built": 2005, "current_value": 375000, "mortgage_balance": 265000, "equity": 110000,
         "monthly_rent": 2250, "monthly_mortgage": 1420, "health_score": 88,
         "last_inspection_date": d.ago(52)},
        {"id": "demo-investor-3", "nickname": "Cedar Court 4-Plex", "address": "891 Cedar Court",
         "city": "Vancouver", "state": "WA", "property_type": "Fourplex", "door_count": 4,
         "year_built": 1985, "current_value": 495000, "mortgage_balance": 380000, "equity": 115000,
         "monthly_rent": 3600, "monthly_mortgage": 2050, "health_score": 72,
         "last_inspection_date": d.ago(18)},
    )
    return DemoDataset(
        profile=DemoProfile.INVESTOR,
        property={
            "id": "demo-investor-portfolio",
            "address": "3-property portfolio",
            "door_count": sum(p["door_count"] for p in properties),
            "is_demo": True, "demo_type": "investor",
            "health_score": 81,
        },
        properties=properties,
        systems=(
            {"id": "demo-inv-sys-001", "property_id": "demo-investor-1", "system_type": "HVAC System",
             "nickname": "Unit A Furnace", "installation_year": 2012, "condition": "Good",
             "estimated_lifespan_years": 18, "replacement_cost_estimate": 5200},
            {"id": "demo-inv-sys-002", "property_id": "demo-investor-2", "system_type": "Roof System",
             "nickname": "Main Roof", "installation_year": 2005, "condition": "Fair",
             "estimated_lifespan_years": 25, "replacement_cost_estimate": 10500},
            {"id": "demo-inv-sys-003", "property_id": "demo-investor-3", "system_type": "Water & Sewer/Septic",
             "nickname": "Shared Boiler", "installation_year": 1999, "condition": "Poor",
             "estimated_lifespan_years": 20, "replacement_cost_estimate": 9800},
        ),
        tasks=(
            {"id": "demo-inv-task-001", "property_id": "demo-investor-3", "unit_tag": "Unit 3B",
             "title": "Repair Leaking Supply Line", "priority": "Urgent",
             "current_fix_cost": 250, "delayed_fix_cost": 6000, "status": "Identified"},
            {"id": "demo-inv-task-002", "property_id": "demo-investor-3", "unit_tag": "Building",
             "title": "Boiler Service", "priority": "High",
             "current_fix_cost": 450, "delayed_fix_cost": 9800, "status": "Scheduled",
             "scheduled_date": d.ahead(4)},
            {"id": "demo-inv-task-003", "property_id": "demo-investor-1", "unit_tag": "Unit A",
             "title": "Replace Furnace Filter", "priority": "Routine",
             "current_fix_cost": 30, "status": "Scheduled", "scheduled_date": d.now()},
            {"id": "demo-inv-task-004", "property_id": "demo-investor-2", "unit_tag": "Building",
             "title": "Gutter Cleaning", "priority": "Medium",
             "current_fix_cost": 175, "delayed_fix_cost": 3000, "status": "Scheduled",
             "scheduled_date": d.ahead(12)},
            {"id": "demo-inv-task-005", "property_id": "demo-investor-3", "unit_tag": "Unit 4D",
             "title": "Turnover Paint + Inspection", "priority": "High",
             "current_fix_cost": 1200, "status": "Identified"},
            {"id": "demo-inv-task-006", "property_id": "demo-investor-1", "unit_tag": "Unit B",
             "title": "Re-caulk Tub Surround", "priority": "Medium",
             "current_fix_cost": 40, "delayed_fix_cost": 2400, "status": "Identified"},
        ),
        inspections=(
            {"id": "demo-inv-insp-001", "property_id": "demo-investor-3", "inspection_type": "Fall Inspection",
             "inspection_date": d.ago(18), "status": "Completed", "issues_found": 9},
        ),
        maintenance_history=(
            {"id": "demo-inv-hist-001", "property_id": "demo-investor-1", "date": d.ago(40),
             "title": "Water Heater Flush (both units)", "cost": 180, "prevented_cost": 2400},
            {"id": "demo-inv-hist-002", "property_id": "demo-investor-2", "date": d.ago(75),
             "title": "Roof Moss Treatment", "cost": 350, "prevented_cost": 4200},
        ),
        preserve_schedules=(
            {"id": "demo-inv-pres-001", "system": "Shared Boiler", "intervention": "Annual boiler service",
             "cost": 450, "life_extension_years": 4, "roi_multiple": 5.4},
        ),
        upgrade_projects=(
            {"id": "demo-inv-upg-001", "title": "Cedar Court LED Retrofit", "status": "Planned",
             "budget": 1800, "spent": 0, "roi_percent": 110, "start_date": d.ahead(21)},
        ),
        portfolio_metrics={
            "total_properties": 3, "total_units": 7,
            "total_value": 1210000, "total_equity": 367000,
            "monthly_revenue": 8250, "net_cash_flow": 3170,
            "average_health_score": 81, "portfolio_roi": 17.8,
            "preventive_savings": 18400,
            "current_equity": 547000, "projected_equity_10yr": 1800000,
            "recommendation": "Hold & Optimize",
        },
        stats={"total_systems": 48, "total_tasks": 6, "tasks_urgent": 1, "health_score": 81},
    )


class ProfileCatalog:
    """Static registry of demo personas mapped to their canned datasets"""

    def __init__(self):
        self._builders = {
            DemoProfile.HOMEOWNER: _homeowner,
            DemoProfile.STRUGGLING: _struggling,
            DemoProfile.IMPROVING: _improving,
            DemoProfile.EXCELLENT: _excellent,
            DemoProfile.INVESTOR: _investor,
        }
        missing = [p for p in DemoProfile if p.is_active and p not in self._builders]
        if missing:
            raise ValueError(f"No dataset builder for profiles: {missing}")

    def profiles(self):
        return list(self._builders)

    def load(self, profile, today=None) -> Optional[DemoDataset]:
        """Build a fresh dataset for profile; relative dates are computed against today"""
        profile = DemoProfile.parse(profile)
        if not profile.is_active:
            return None
        today = today or date.today()
        dataset = self._builders[profile](_Dates(today))
        dataset = _stamp(dataset, today)
        logger.debug("dataset_loaded", profile=profile.value, today=today.isoformat())
        return dataset


def _stamp(dataset, today):
    # frozen dataclass; rebuild with generation date
    return DemoDataset(**{**dataset.__dict__, "generated_on": today})


catalog = ProfileCatalog()
