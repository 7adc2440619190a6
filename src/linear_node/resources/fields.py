"""Field selections shared by every query and mutation of a given entity."""

ISSUE_FIELDS = """
  id
  identifier
  title
  description
  priority
  priorityLabel
  estimate
  sortOrder
  number
  url
  branchName
  dueDate
  createdAt
  updatedAt
  archivedAt
  startedAt
  completedAt
  canceledAt
  trashed
  state { id name color type }
  team { id name key }
  creator { id name email }
  assignee { id name email }
  project { id name }
  cycle { id number name }
  parent { id identifier title }
  labels { nodes { id name color } }
"""

COMMENT_FIELDS = """
  id
  body
  createdAt
  updatedAt
  editedAt
  url
  user { id name email }
  issue { id identifier title }
  parent { id }
"""

PROJECT_FIELDS = """
  id
  name
  description
  icon
  color
  state
  progress
  scope
  startDate
  targetDate
  startedAt
  completedAt
  canceledAt
  sortOrder
  createdAt
  updatedAt
  archivedAt
  url
  lead { id name email }
  teams { nodes { id name key } }
"""

PROJECT_UPDATE_FIELDS = """
  id
  body
  health
  createdAt
  updatedAt
  editedAt
  user { id name email }
  project { id name }
"""

PROJECT_MILESTONE_FIELDS = """
  id
  name
  description
  targetDate
  sortOrder
  createdAt
  updatedAt
  archivedAt
  project { id name }
"""

CYCLE_FIELDS = """
  id
  number
  name
  description
  startsAt
  endsAt
  completedAt
  progress
  scope
  createdAt
  updatedAt
  archivedAt
  team { id name key }
"""

TEAM_FIELDS = """
  id
  name
  key
  description
  icon
  color
  private
  timezone
  createdAt
  updatedAt
  archivedAt
"""

USER_FIELDS = """
  id
  name
  displayName
  email
  avatarUrl
  active
  admin
  createdAt
  updatedAt
  archivedAt
"""

LABEL_FIELDS = """
  id
  name
  description
  color
  createdAt
  updatedAt
  archivedAt
  team { id name key }
  parent { id name }
"""

WORKFLOW_STATE_FIELDS = """
  id
  name
  color
  description
  position
  type
  createdAt
  updatedAt
  archivedAt
  team { id name key }
"""

DOCUMENT_FIELDS = """
  id
  title
  content
  icon
  color
  slugId
  sortOrder
  createdAt
  updatedAt
  archivedAt
  creator { id name email }
  project { id name }
"""

ATTACHMENT_FIELDS = """
  id
  title
  subtitle
  url
  sourceType
  metadata
  createdAt
  updatedAt
  archivedAt
  issue { id identifier title }
  creator { id name }
"""

FAVORITE_FIELDS = """
  id
  type
  sortOrder
  createdAt
  updatedAt
  folderName
  owner { id name }
  issue { id identifier title }
  project { id name }
  cycle { id number name }
  label { id name }
  document { id title }
"""

NOTIFICATION_FIELDS = """
  id
  type
  readAt
  emailedAt
  snoozedUntilAt
  createdAt
  updatedAt
  archivedAt
  actor { id name }
  ... on IssueNotification {
    issue { id identifier title }
    comment { id body }
    team { id name }
  }
  ... on ProjectNotification {
    project { id name }
  }
"""

WEBHOOK_FIELDS = """
  id
  label
  url
  enabled
  createdAt
  updatedAt
  archivedAt
  resourceTypes
  allPublicTeams
  team { id name key }
  creator { id name }
"""

INTEGRATION_FIELDS = """
  id
  service
  createdAt
  updatedAt
  archivedAt
  team { id name key }
  creator { id name }
"""

REACTION_FIELDS = """
  id
  emoji
  createdAt
  user { id name }
"""

ISSUE_RELATION_FIELDS = """
  id
  type
  createdAt
  updatedAt
  issue { id identifier title }
  relatedIssue { id identifier title }
"""

PAGE_INFO = "pageInfo { hasNextPage endCursor }"
