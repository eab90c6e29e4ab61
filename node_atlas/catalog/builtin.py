"""Built-in catalog of well-known n8n nodes.

Used as the initial catalog before (or instead of) a remote refresh. The
AI flag is not written by hand; it goes through the same classification
as ingested records.
"""
from typing import Optional

from node_atlas.ingest.parser import derive_ai_flag
from node_atlas.models.catalog import CatalogEntity

BASE = "n8n-nodes-base"
LANGCHAIN = "@n8n/n8n-nodes-langchain"

BUILTIN_REVISION = "builtin"


def _node(
    name: str,
    display_name: str,
    description: str,
    category: str,
    subcategory: Optional[str] = None,
    tags: tuple[str, ...] = (),
    trigger: bool = False,
    package: str = BASE,
) -> CatalogEntity:
    identifier = f"{package}.{name}"
    return CatalogEntity(
        identifier=identifier,
        display_name=display_name,
        description=description,
        category=category,
        subcategory=subcategory,
        tags=list(tags),
        is_trigger=trigger,
        is_ai=derive_ai_flag(identifier, category, subcategory),
    )


# =============================================================================
# TRIGGERS
# =============================================================================

TRIGGER_NODES = [
    _node("webhook", "Webhook", "Receive HTTP requests and start workflow",
          "Trigger Nodes", tags=("http", "webhook"), trigger=True),
    _node("manualTrigger", "Manual Trigger", "Manually start the workflow",
          "Trigger Nodes", trigger=True),
    _node("scheduleTrigger", "Schedule Trigger", "Trigger workflow on a schedule (cron or interval)",
          "Trigger Nodes", tags=("cron", "interval"), trigger=True),
    _node("emailReadImap", "Email Trigger (IMAP)", "Trigger when new email arrives",
          "Trigger Nodes", subcategory="Email", tags=("imap",), trigger=True),
]

# =============================================================================
# CORE UTILITIES
# =============================================================================

CORE_NODES = [
    _node("httpRequest", "HTTP Request", "Make HTTP requests to any API",
          "Core Utilities", subcategory="HTTP", tags=("api", "rest")),
    _node("respondToWebhook", "Respond to Webhook", "Send response back to webhook caller",
          "Core Utilities", subcategory="HTTP"),
    _node("set", "Set", "Set, rename or remove fields on items",
          "Core Utilities", subcategory="Data Transformation"),
    _node("function", "Function", "Run custom JavaScript over all items",
          "Core Utilities", subcategory="Data Transformation"),
    _node("code", "Code", "Run custom JavaScript or Python code",
          "Core Utilities", subcategory="Data Transformation", tags=("javascript", "python")),
    _node("if", "IF", "Route items based on a condition",
          "Core Utilities", subcategory="Flow"),
    _node("switch", "Switch", "Route items to one of several outputs",
          "Core Utilities", subcategory="Flow"),
    _node("merge", "Merge", "Combine data from two inputs",
          "Core Utilities", subcategory="Flow"),
    _node("splitInBatches", "Split In Batches", "Loop over items in batches",
          "Core Utilities", subcategory="Flow", tags=("loop",)),
    _node("stopAndError", "Stop and Error", "Throw an error to stop the workflow",
          "Core Utilities", subcategory="Flow"),
]

# =============================================================================
# AI
# =============================================================================

AI_NODES = [
    _node("lmChatOpenAi", "OpenAI", "Chat completions with OpenAI GPT models",
          "AI", subcategory="Language Models", tags=("gpt", "llm"), package=LANGCHAIN),
    _node("lmChatAnthropic", "Anthropic Claude", "Chat completions with Anthropic Claude models",
          "AI", subcategory="Language Models", tags=("claude", "llm"), package=LANGCHAIN),
    _node("embeddingsOpenAi", "Embeddings OpenAI", "Generate text embeddings with OpenAI",
          "AI", subcategory="Embeddings", package=LANGCHAIN),
    _node("vectorStorePinecone", "Pinecone Vector Store", "Store and retrieve document embeddings in Pinecone",
          "AI", subcategory="Vector Databases", tags=("retrieval",), package=LANGCHAIN),
    _node("agent", "AI Agent", "Autonomous agent that uses tools to reach a goal",
          "AI", subcategory="Agents", package=LANGCHAIN),
    _node("sentimentAnalysis", "Sentiment Analysis", "Classify the sentiment of text",
          "AI", subcategory="AI Tools", package=LANGCHAIN),
    _node("openAiImage", "DALL-E Image Generator", "Generate images from text prompts",
          "AI", subcategory="Image Generation", package=LANGCHAIN),
]

# =============================================================================
# COMMUNICATION
# =============================================================================

COMMUNICATION_NODES = [
    _node("slack", "Slack", "Send messages and manage channels in Slack",
          "Communication", subcategory="Chat", tags=("chat",)),
    _node("discord", "Discord", "Send messages to Discord channels",
          "Communication", subcategory="Chat"),
    _node("microsoftTeams", "Microsoft Teams", "Send messages to Microsoft Teams channels",
          "Communication", subcategory="Chat", tags=("teams",)),
    _node("telegram", "Telegram", "Send messages with a Telegram bot",
          "Communication", subcategory="Chat"),
    _node("gmail", "Gmail", "Send and read email with Gmail",
          "Communication", subcategory="Email"),
    _node("emailSend", "Send Email", "Send email via SMTP",
          "Communication", subcategory="Email", tags=("smtp",)),
    _node("twitter", "X (Formerly Twitter)", "Post tweets and read timelines",
          "Communication", subcategory="Social Media", tags=("twitter",)),
    _node("linkedIn", "LinkedIn", "Post to LinkedIn profiles and company pages",
          "Communication", subcategory="Social Media"),
    _node("zoom", "Zoom", "Create and manage Zoom meetings",
          "Communication", subcategory="Video Conferencing"),
    _node("googleCalendar", "Google Calendar", "Create and manage calendar events",
          "Communication", subcategory="Scheduling"),
]

# =============================================================================
# BUSINESS & PRODUCTIVITY
# =============================================================================

BUSINESS_NODES = [
    _node("hubspot", "HubSpot", "HubSpot CRM - contacts, companies, deals, tickets",
          "Business", subcategory="CRM"),
    _node("salesforce", "Salesforce", "Salesforce CRM - accounts, leads and opportunities",
          "Business", subcategory="CRM"),
    _node("pipedrive", "Pipedrive", "Pipedrive CRM - deals, persons and organizations",
          "Business", subcategory="CRM"),
    _node("asana", "Asana", "Manage tasks and projects in Asana",
          "Business", subcategory="Project Management"),
    _node("trello", "Trello", "Manage boards, lists and cards in Trello",
          "Business", subcategory="Project Management"),
    _node("jira", "Jira Software", "Create and update Jira issues",
          "Business", subcategory="Project Management"),
    _node("zendesk", "Zendesk", "Manage support tickets in Zendesk",
          "Business", subcategory="Customer Support"),
    _node("googleSheets", "Google Sheets", "Read, append and update rows in Google Sheets",
          "Productivity", subcategory="Spreadsheets", tags=("spreadsheet",)),
    _node("airtable", "Airtable", "Read and write Airtable records",
          "Productivity", subcategory="Spreadsheets"),
    _node("notion", "Notion", "Manage Notion pages and databases",
          "Productivity", subcategory="Knowledge Base"),
]

# =============================================================================
# DATABASES
# =============================================================================

DATABASE_NODES = [
    _node("postgres", "PostgreSQL", "Query, insert and update rows in PostgreSQL",
          "Database", subcategory="SQL", tags=("postgres", "sql")),
    _node("mySql", "MySQL", "Query, insert and update rows in MySQL",
          "Database", subcategory="SQL", tags=("sql",)),
    _node("mongoDb", "MongoDB", "Find, insert and update MongoDB documents",
          "Database", subcategory="NoSQL"),
    _node("redis", "Redis", "Get, set and publish values in Redis",
          "Database", subcategory="Cache"),
    _node("elasticsearch", "Elasticsearch", "Index and search documents in Elasticsearch",
          "Database", subcategory="Search"),
]

# =============================================================================
# CLOUD SERVICES
# =============================================================================

CLOUD_NODES = [
    _node("awsS3", "AWS S3", "Upload, download and list objects in S3 buckets",
          "Cloud Services", subcategory="Storage", tags=("aws",)),
    _node("awsLambda", "AWS Lambda", "Invoke AWS Lambda functions",
          "Cloud Services", subcategory="Compute", tags=("aws",)),
    _node("awsSns", "AWS SNS", "Publish notifications to SNS topics",
          "Cloud Services", subcategory="Messaging", tags=("aws",)),
    _node("googleCloudStorage", "Google Cloud Storage", "Manage objects in Google Cloud Storage buckets",
          "Cloud Services", subcategory="Storage", tags=("gcp",)),
    _node("azureStorage", "Azure Storage", "Manage blobs in Azure Storage",
          "Cloud Services", subcategory="Storage"),
    _node("googleDrive", "Google Drive", "Upload, download and share files in Google Drive",
          "Cloud Services", subcategory="Storage"),
]

# =============================================================================
# E-COMMERCE & DEVELOPER TOOLS
# =============================================================================

ECOMMERCE_NODES = [
    _node("shopify", "Shopify", "Manage Shopify orders, products and customers",
          "E-commerce", subcategory="Storefront"),
    _node("wooCommerce", "WooCommerce", "Manage WooCommerce orders and products",
          "E-commerce", subcategory="Storefront"),
    _node("stripe", "Stripe", "Manage Stripe charges, customers and invoices",
          "E-commerce", subcategory="Payments"),
]

DEVELOPER_NODES = [
    _node("github", "GitHub", "Manage GitHub issues, pull requests and releases",
          "Developer Tools", subcategory="Version Control", tags=("git",)),
    _node("gitlab", "GitLab", "Manage GitLab issues and merge requests",
          "Developer Tools", subcategory="Version Control", tags=("git",)),
    _node("jenkins", "Jenkins", "Trigger and inspect Jenkins builds",
          "Developer Tools", subcategory="CI/CD"),
]

BUILTIN_NODES: list[CatalogEntity] = [
    *TRIGGER_NODES,
    *CORE_NODES,
    *AI_NODES,
    *COMMUNICATION_NODES,
    *BUSINESS_NODES,
    *DATABASE_NODES,
    *CLOUD_NODES,
    *ECOMMERCE_NODES,
    *DEVELOPER_NODES,
]


def builtin_entities() -> list[CatalogEntity]:
    """Get a copy of the built-in catalog."""
    return list(BUILTIN_NODES)
