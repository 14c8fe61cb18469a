"""Centralized Enum Definitions"""

import enum


# Users
class UserRole(str, enum.Enum):
    """User roles for RBAC"""
    CUSTOMER = "customer"
    ADMIN = "admin"
    STAFF = "staff"


# Billing
class BillStatus(str, enum.Enum):
    """Bill payment status"""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


# Service-issue reports
class ReportType(str, enum.Enum):
    """Kinds of issues a customer can report"""
    WATER_LEAK = "water_leak"
    WATER_QUALITY = "water_quality"
    NO_WATER = "no_water"
    LOW_PRESSURE = "low_pressure"
    METER_ISSUE = "meter_issue"
    BILLING_ISSUE = "billing_issue"
    OTHER = "other"


class ReportPriority(str, enum.Enum):
    """Report priority, drives the SLA estimate"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ReportStatus(str, enum.Enum):
    """Report handling status"""
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"
    REJECTED = "rejected"


# News
class NewsCategory(str, enum.Enum):
    """News article categories"""
    ANNOUNCEMENT = "announcement"
    MAINTENANCE = "maintenance"
    SERVICE_UPDATE = "service_update"
    COMMUNITY = "community"
    TIPS = "tips"
    EMERGENCY = "emergency"


class NewsStatus(str, enum.Enum):
    """News publication status"""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class TargetAudience(str, enum.Enum):
    """Who a news article is written for"""
    ALL = "all"
    CUSTOMERS = "customers"
    STAFF = "staff"
    PUBLIC = "public"


class NewsPriority(str, enum.Enum):
    """News display priority"""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"
