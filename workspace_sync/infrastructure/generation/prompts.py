SYSTEM_PROMPT = """
You generate realistic on-the-job Data Science & Engineering work for a simulated employer.
Reply with JSON only, no commentary and no markdown fences, unless asked for prose.
"""

TASK_FIELDS = """
Each task object has:
- id: string (unique)
- title: string (Professional JIRA-style ticket title)
- short_description: string (Focus on the BUSINESS IMPACT, not just the tech)
- difficulty: string (Enum: 'Easy', 'Medium', 'Hard')
- skills: string[] (e.g. "dbt", "Airflow", "Docker", "Postgres", "FastAPI", "Pandas", "Scikit-Learn")
- sub_items: array of {{ id: string, title: string }} (Max 3 per task)
"""

ROADMAP_PROMPT = """
Company: {company} ({industry}). {description}

Generate a professional career roadmap consisting of EXACTLY 19 Data Science & Engineering projects.
The projects must reflect real-world business problems and follow this seniority distribution:

1. 5 Junior/Analyst projects: SQL extraction, data cleaning, exploratory analysis, business dashboards.
2. 5 Mid-Level projects: predictive modeling, A/B test design and analysis, advanced visualization.
3. 9 Senior/Staff projects: MLOps, data engineering pipelines, Airflow, Docker, dbt, GenAI integration.

Return a JSON array of task objects.
""" + TASK_FIELDS

FOLLOWUP_PROMPT = """
Company: {company} ({industry}).

Generate EXACTLY 1 new follow-up task based on the completion of the previous ticket: "{parent_title}".
The new task is the logical next step in a production lifecycle (if they built a model, now deploy it;
if they analyzed data, now automate the report).

Return a JSON array containing 1 task object.
""" + TASK_FIELDS

DETAIL_PROMPT = """
Company: {company} ({industry}). Task: {title}. {short_description}

You are a Staff Data Scientist acting as a mentor. Generate a realistic project simulation package
as a JSON object with:
- sender_name, sender_role: the stakeholder writing the request
- email_subject, email_body: a professional but slightly ambiguous email focused on the business problem and KPIs
- technical_guide: a Staff-level execution guide covering architecture and production pitfalls
- assets: 2-3 objects {{ name, content, type }} with type one of 'csv', 'sql', 'json'; data must be dirty
- quiz: 5 objects {{ id, question, options (optional string[]), correct_answer, explanation }}
"""

SOLUTION_PROMPT = """
Company: {company} ({industry}).

Write the reference solution for the ticket "{title}": {short_description}
Cover the approach, the key queries or code, validation steps and the business outcome.
Reply in markdown prose.
"""

ENV_SETUP_PROMPT = """
Company: {company} ({industry}).

You are a Senior DevOps Engineer. Provision a local production-grade environment:
1. Postgres with a 'warehouse' database.
2. Services for tools relevant to the industry stack (Redis, MinIO, or a lightweight Airflow agent).
3. init.sql with a realistic schema of 3-4 related tables, foreign keys and indexes, and NO data.

Return a JSON object {{ "docker_compose": string, "init_sql": string }}.
"""
