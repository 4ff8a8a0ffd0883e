from typing import Any, Dict, List


DEFAULT_DEMOGRAPHIC_RULES: List[Dict[str, Any]] = [
    # Company size
    {
        "rule_name": "Large Enterprise (1000+ employees)",
        "condition_field": "employee_count",
        "condition_operator": "greater_than",
        "condition_value": "1000",
        "points_awarded": 15,
        "priority_order": 1,
    },
    {
        "rule_name": "Mid-Market (250-999 employees)",
        "condition_field": "employee_count",
        "condition_operator": "between",
        "condition_value": "250,999",
        "points_awarded": 12,
        "priority_order": 2,
    },
    {
        "rule_name": "SME (50-249 employees)",
        "condition_field": "employee_count",
        "condition_operator": "between",
        "condition_value": "50,249",
        "points_awarded": 8,
        "priority_order": 3,
    },
    {
        "rule_name": "Small Business (10-49 employees)",
        "condition_field": "employee_count",
        "condition_operator": "between",
        "condition_value": "10,49",
        "points_awarded": 5,
        "priority_order": 4,
    },
    # Revenue
    {
        "rule_name": "High Revenue (100+ Crore)",
        "condition_field": "revenue_inr_crore",
        "condition_operator": "greater_than",
        "condition_value": "100",
        "points_awarded": 15,
        "priority_order": 5,
    },
    {
        "rule_name": "Medium Revenue (10-100 Crore)",
        "condition_field": "revenue_inr_crore",
        "condition_operator": "between",
        "condition_value": "10,100",
        "points_awarded": 10,
        "priority_order": 6,
    },
    {
        "rule_name": "Growing Revenue (1-10 Crore)",
        "condition_field": "revenue_inr_crore",
        "condition_operator": "between",
        "condition_value": "1,10",
        "points_awarded": 5,
        "priority_order": 7,
    },
    # Target industries
    {
        "rule_name": "Technology/Software",
        "condition_field": "industry",
        "condition_operator": "equals",
        "condition_value": "Technology",
        "points_awarded": 12,
        "priority_order": 10,
    },
    {
        "rule_name": "Manufacturing",
        "condition_field": "industry",
        "condition_operator": "equals",
        "condition_value": "Manufacturing",
        "points_awarded": 10,
        "priority_order": 11,
    },
    {
        "rule_name": "Financial Services",
        "condition_field": "industry",
        "condition_operator": "equals",
        "condition_value": "Financial Services",
        "points_awarded": 10,
        "priority_order": 12,
    },
    {
        "rule_name": "Healthcare",
        "condition_field": "industry",
        "condition_operator": "equals",
        "condition_value": "Healthcare",
        "points_awarded": 8,
        "priority_order": 13,
    },
    # Contact seniority
    {
        "rule_name": "C-Level Executive",
        "condition_field": "seniority_level",
        "condition_operator": "equals",
        "condition_value": "c_level",
        "points_awarded": 15,
        "priority_order": 20,
    },
    {
        "rule_name": "VP Level",
        "condition_field": "seniority_level",
        "condition_operator": "equals",
        "condition_value": "vp",
        "points_awarded": 12,
        "priority_order": 21,
    },
    {
        "rule_name": "Director Level",
        "condition_field": "seniority_level",
        "condition_operator": "equals",
        "condition_value": "director",
        "points_awarded": 10,
        "priority_order": 22,
    },
    {
        "rule_name": "Manager Level",
        "condition_field": "seniority_level",
        "condition_operator": "equals",
        "condition_value": "manager",
        "points_awarded": 6,
        "priority_order": 23,
    },
    # Authority
    {
        "rule_name": "Budget Authority",
        "condition_field": "has_budget_authority",
        "condition_operator": "equals",
        "condition_value": "true",
        "points_awarded": 10,
        "priority_order": 30,
    },
    {
        "rule_name": "Technical Authority",
        "condition_field": "has_technical_authority",
        "condition_operator": "equals",
        "condition_value": "true",
        "points_awarded": 8,
        "priority_order": 31,
    },
    # Tier-1 cities
    {
        "rule_name": "Mumbai Location",
        "condition_field": "location_city",
        "condition_operator": "equals",
        "condition_value": "Mumbai",
        "points_awarded": 5,
        "priority_order": 40,
    },
    {
        "rule_name": "Delhi/NCR Location",
        "condition_field": "location_city",
        "condition_operator": "in",
        "condition_value": "Delhi,Noida,Gurgaon,Faridabad",
        "points_awarded": 5,
        "priority_order": 41,
    },
    {
        "rule_name": "Bangalore Location",
        "condition_field": "location_city",
        "condition_operator": "equals",
        "condition_value": "Bangalore",
        "points_awarded": 5,
        "priority_order": 42,
    },
]


DEFAULT_BEHAVIORAL_RULES: List[Dict[str, Any]] = [
    # High intent
    {"rule_name": "Demo Request", "activity_type": "form_submission", "activity_subtype": "demo_request", "base_points": 25, "repeat_multiplier": 1.0, "max_occurrences": 1},
    {"rule_name": "Contact Sales", "activity_type": "form_submission", "activity_subtype": "contact_sales", "base_points": 30, "repeat_multiplier": 1.0, "max_occurrences": 1},
    {"rule_name": "Free Trial Signup", "activity_type": "form_submission", "activity_subtype": "trial_signup", "base_points": 20, "repeat_multiplier": 1.0, "max_occurrences": 1},
    {"rule_name": "Pricing Page View", "activity_type": "page_view", "activity_subtype": "pricing", "base_points": 15, "repeat_multiplier": 1.2, "max_occurrences": 3},
    {"rule_name": "Product Comparison View", "activity_type": "page_view", "activity_subtype": "comparison", "base_points": 12, "repeat_multiplier": 1.1, "max_occurrences": 2},
    # Medium intent
    {"rule_name": "Whitepaper Download", "activity_type": "content_download", "activity_subtype": "whitepaper", "base_points": 10, "repeat_multiplier": 1.0, "max_occurrences": 3},
    {"rule_name": "Case Study View", "activity_type": "content_view", "activity_subtype": "case_study", "base_points": 8, "repeat_multiplier": 1.0, "max_occurrences": 5},
    {"rule_name": "Webinar Registration", "activity_type": "event_registration", "activity_subtype": "webinar", "base_points": 15, "repeat_multiplier": 1.0, "max_occurrences": 2},
    {"rule_name": "Webinar Attendance", "activity_type": "event_attendance", "activity_subtype": "webinar", "base_points": 20, "repeat_multiplier": 1.0, "max_occurrences": 2},
    {"rule_name": "Product Page View", "activity_type": "page_view", "activity_subtype": "product", "base_points": 8, "repeat_multiplier": 1.15, "max_occurrences": 5},
    {"rule_name": "Email Link Click", "activity_type": "email_engagement", "activity_subtype": "click", "base_points": 5, "repeat_multiplier": 1.1, "max_occurrences": 10},
    # Low intent
    {"rule_name": "Email Open", "activity_type": "email_engagement", "activity_subtype": "open", "base_points": 3, "repeat_multiplier": 1.05, "max_occurrences": 10},
    {"rule_name": "Blog Post View", "activity_type": "page_view", "activity_subtype": "blog", "base_points": 2, "repeat_multiplier": 1.0, "max_occurrences": 10},
    {"rule_name": "Newsletter Signup", "activity_type": "form_submission", "activity_subtype": "newsletter", "base_points": 5, "repeat_multiplier": 1.0, "max_occurrences": 1},
    {"rule_name": "Homepage Visit", "activity_type": "page_view", "activity_subtype": "homepage", "base_points": 2, "repeat_multiplier": 1.0, "max_occurrences": 5},
    # Engagement
    {"rule_name": "Video Watch (>50%)", "activity_type": "content_view", "activity_subtype": "video", "base_points": 7, "repeat_multiplier": 1.0, "max_occurrences": 5},
]


DEFAULT_NEGATIVE_RULES: List[Dict[str, Any]] = [
    # Inactivity
    {"rule_name": "No Activity 30 Days", "condition_field": "last_activity_date", "condition_operator": "days_since", "condition_value": "30", "points_deducted": 10},
    {"rule_name": "No Activity 60 Days", "condition_field": "last_activity_date", "condition_operator": "days_since", "condition_value": "60", "points_deducted": 20},
    {"rule_name": "No Activity 90 Days", "condition_field": "last_activity_date", "condition_operator": "days_since", "condition_value": "90", "points_deducted": 30},
    # Wrong fit
    {"rule_name": "Too Small (< 5 employees)", "condition_field": "employee_count", "condition_operator": "less_than", "condition_value": "5", "points_deducted": 20},
    {"rule_name": "Student Email Domain", "condition_field": "email", "condition_operator": "contains", "condition_value": "@student,@edu.", "points_deducted": 15},
    {"rule_name": "Competitor Domain", "condition_field": "email", "condition_operator": "contains", "condition_value": "@competitor.com", "points_deducted": 50},
    # Invalid contact
    {"rule_name": "Bounced Email", "condition_field": "email_status", "condition_operator": "equals", "condition_value": "bounced", "points_deducted": 25},
    {"rule_name": "Unsubscribed", "condition_field": "email_status", "condition_operator": "equals", "condition_value": "unsubscribed", "points_deducted": 30},
    # Budget
    {"rule_name": "No Budget Authority", "condition_field": "has_budget_authority", "condition_operator": "equals", "condition_value": "false", "points_deducted": 5},
]


DEFAULT_SCORING_THRESHOLDS: List[Dict[str, Any]] = [
    {"classification_name": "hot", "min_score": 80, "max_score": 200, "recommended_action": "Immediate contact by senior sales rep. Schedule demo within 24 hours.", "sla_response_hours": 2},
    {"classification_name": "warm", "min_score": 60, "max_score": 79, "recommended_action": "Contact within 48 hours. Send personalized email with case studies.", "sla_response_hours": 24},
    {"classification_name": "qualified", "min_score": 40, "max_score": 59, "recommended_action": "Add to nurturing campaign. Send educational content weekly.", "sla_response_hours": 72},
    {"classification_name": "cold", "min_score": 0, "max_score": 39, "recommended_action": "Low priority nurturing. Monthly newsletter only.", "sla_response_hours": None},
]
