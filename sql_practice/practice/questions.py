from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Difficulty(Enum):
    EASY = ("Easy", 10)
    MEDIUM = ("Medium", 20)
    HARD = ("Hard", 30)
    PRO = ("Pro", 50)

    def __init__(self, display_name: str, default_points: int):
        self.display_name = display_name
        self.default_points = default_points


@dataclass(frozen=True)
class PracticeQuestion:
    id: str
    title: str
    description: str
    example_sql: str
    solution: str                   # reference SQL
    difficulty: Difficulty
    category: str = "DML"
    points: int = 0                 # 0 means "use the difficulty default"
    hint: Optional[str] = None

    @property
    def effective_points(self) -> int:
        return self.points if self.points > 0 else self.difficulty.default_points


def default_questions() -> List[PracticeQuestion]:
    """The built-in catalog. Every solution runs against the practice seed data."""
    return [
        PracticeQuestion(
            id="easy_2",
            title="Find High Salary Employees",
            description="Write a SQL query to find all employees with salary greater than 50000.\n\n"
                        "Table: employees (id, first_name, last_name, salary, ...)",
            example_sql="-- Write your SQL query here\nSELECT * FROM employees WHERE salary > 50000;",
            solution="SELECT * FROM employees WHERE salary > 50000;",
            difficulty=Difficulty.EASY,
            points=10,
            hint="Use WHERE clause with > operator to filter by salary.",
        ),
        PracticeQuestion(
            id="easy_3",
            title="Count Total Employees",
            description="Write a SQL query to count the total number of employees.\n\n"
                        "Table: employees\n\nExpected output: a single number showing the total count",
            example_sql="-- Write your SQL query here\nSELECT COUNT(*) FROM employees;",
            solution="SELECT COUNT(*) FROM employees;",
            difficulty=Difficulty.EASY,
            points=10,
            hint="Use COUNT(*) function to count all rows.",
        ),
        PracticeQuestion(
            id="easy_4",
            title="Select Employees from Engineering",
            description="Write a SQL query to find all employees who work in the 'Engineering' department.\n\n"
                        "Tables: employees, departments",
            example_sql="-- Write your SQL query here\nSELECT e.* FROM employees e\n"
                        "JOIN departments d ON e.department_id = d.id\nWHERE d.department_name = 'Engineering';",
            solution="SELECT e.* FROM employees e JOIN departments d ON e.department_id = d.id "
                     "WHERE d.department_name = 'Engineering';",
            difficulty=Difficulty.EASY,
            points=10,
            hint="Use JOIN to connect tables and WHERE to filter by department name.",
        ),
        PracticeQuestion(
            id="easy_5",
            title="Find Employees Hired After 2020",
            description="Write a SQL query to find all employees hired after January 1, 2020.\n\n"
                        "Table: employees",
            example_sql="-- Write your SQL query here\nSELECT * FROM employees WHERE hire_date > '2020-01-01';",
            solution="SELECT * FROM employees WHERE hire_date > '2020-01-01';",
            difficulty=Difficulty.EASY,
            points=10,
            hint="Use WHERE clause with date comparison.",
        ),
        PracticeQuestion(
            id="medium_1",
            title="Average Salary by Department",
            description="Write a SQL query to find the average salary for each department.\n\n"
                        "Tables: employees, departments\n\nExpected output: department name and average salary",
            example_sql="-- Write your SQL query here\nSELECT d.department_name, AVG(e.salary) AS avg_salary\n"
                        "FROM employees e\nJOIN departments d ON e.department_id = d.id\n"
                        "GROUP BY d.id, d.department_name;",
            solution="SELECT d.department_name, AVG(e.salary) AS avg_salary FROM employees e "
                     "JOIN departments d ON e.department_id = d.id GROUP BY d.id, d.department_name;",
            difficulty=Difficulty.MEDIUM,
            points=20,
            hint="Use GROUP BY to group by department and AVG() to calculate average salary.",
        ),
        PracticeQuestion(
            id="medium_2",
            title="Top 5 Highest Paid Employees",
            description="Write a SQL query to find the top 5 highest paid employees with their names and salaries.\n\n"
                        "Table: employees",
            example_sql="-- Write your SQL query here\nSELECT first_name, last_name, salary\nFROM employees\n"
                        "ORDER BY salary DESC\nLIMIT 5;",
            solution="SELECT first_name, last_name, salary FROM employees ORDER BY salary DESC LIMIT 5;",
            difficulty=Difficulty.MEDIUM,
            points=20,
            hint="Use ORDER BY DESC to sort by salary in descending order and LIMIT to get top 5.",
        ),
        PracticeQuestion(
            id="medium_3",
            title="Employees with Names Starting with 'J'",
            description="Write a SQL query to find all employees whose first name starts with 'J'.\n\n"
                        "Table: employees",
            example_sql="-- Write your SQL query here\nSELECT * FROM employees WHERE first_name LIKE 'J%';",
            solution="SELECT * FROM employees WHERE first_name LIKE 'J%';",
            difficulty=Difficulty.MEDIUM,
            points=20,
            hint="Use LIKE operator with wildcard % to match names starting with 'J'.",
        ),
        PracticeQuestion(
            id="medium_4",
            title="Department Employee Count",
            description="Write a SQL query to show each department with the number of employees in it.\n\n"
                        "Tables: employees, departments",
            example_sql="-- Write your SQL query here\nSELECT d.department_name, COUNT(e.id) AS employee_count\n"
                        "FROM departments d\nLEFT JOIN employees e ON d.id = e.department_id\n"
                        "GROUP BY d.id, d.department_name;",
            solution="SELECT d.department_name, COUNT(e.id) AS employee_count FROM departments d "
                     "LEFT JOIN employees e ON d.id = e.department_id GROUP BY d.id, d.department_name;",
            difficulty=Difficulty.MEDIUM,
            points=20,
            hint="Use LEFT JOIN to include departments with 0 employees and COUNT() to count employees.",
        ),
        PracticeQuestion(
            id="medium_5",
            title="Employees Hired This Year",
            description="Write a SQL query to find employees hired in the current year.\n\n"
                        "Table: employees",
            example_sql="-- Write your SQL query here\n"
                        "SELECT * FROM employees WHERE year(hire_date) = year(current_date);",
            solution="SELECT * FROM employees WHERE year(hire_date) = year(current_date);",
            difficulty=Difficulty.MEDIUM,
            points=20,
            hint="Use year() to extract the year from a date and current_date for today's date.",
        ),
        PracticeQuestion(
            id="hard_1",
            title="Department with Most Employees",
            description="Write a SQL query to find which department has the most employees.\n\n"
                        "Tables: employees, departments",
            example_sql="-- Write your SQL query here\nSELECT d.department_name, COUNT(e.id) AS employee_count\n"
                        "FROM departments d\nJOIN employees e ON d.id = e.department_id\n"
                        "GROUP BY d.id, d.department_name\nORDER BY employee_count DESC\nLIMIT 1;",
            solution="SELECT d.department_name, COUNT(e.id) AS employee_count FROM departments d "
                     "JOIN employees e ON d.id = e.department_id GROUP BY d.id, d.department_name "
                     "ORDER BY employee_count DESC LIMIT 1;",
            difficulty=Difficulty.HARD,
            points=30,
            hint="Group by department, count employees, order by count descending, and take the first result.",
        ),
        PracticeQuestion(
            id="hard_2",
            title="Employees Earning More Than Average",
            description="Write a SQL query to find employees who earn more than the average salary.\n\n"
                        "Table: employees",
            example_sql="-- Write your SQL query here\nSELECT * FROM employees\n"
                        "WHERE salary > (SELECT AVG(salary) FROM employees);",
            solution="SELECT * FROM employees WHERE salary > (SELECT AVG(salary) FROM employees);",
            difficulty=Difficulty.HARD,
            points=30,
            hint="Use a subquery to calculate the average salary and compare it in the WHERE clause.",
        ),
        PracticeQuestion(
            id="hard_3",
            title="Second Highest Salary",
            description="Write a SQL query to find the second highest salary.\n\n"
                        "Table: employees",
            example_sql="-- Write your SQL query here\nSELECT MAX(salary) FROM employees\n"
                        "WHERE salary < (SELECT MAX(salary) FROM employees);",
            solution="SELECT MAX(salary) FROM employees WHERE salary < (SELECT MAX(salary) FROM employees);",
            difficulty=Difficulty.HARD,
            points=30,
            hint="Find the maximum salary that is less than the overall maximum salary.",
        ),
        PracticeQuestion(
            id="hard_4",
            title="Employees with No Manager",
            description="Write a SQL query to find all employees who don't have a manager.\n\n"
                        "Table: employees",
            example_sql="-- Write your SQL query here\nSELECT * FROM employees WHERE manager_id IS NULL;",
            solution="SELECT * FROM employees WHERE manager_id IS NULL;",
            difficulty=Difficulty.HARD,
            points=30,
            hint="Use IS NULL to find employees without managers.",
        ),
        PracticeQuestion(
            id="pro_1",
            title="Complex Join with Aggregation",
            description="Write a SQL query to find departments with their employee count and average salary,\n"
                        "only for departments with more than 2 employees.\n\nTables: employees, departments",
            example_sql="-- Write your SQL query here\nSELECT d.department_name,\n"
                        "       COUNT(e.id) AS employee_count,\n       AVG(e.salary) AS avg_salary\n"
                        "FROM departments d\nJOIN employees e ON d.id = e.department_id\n"
                        "GROUP BY d.id, d.department_name\nHAVING COUNT(e.id) > 2;",
            solution="SELECT d.department_name, COUNT(e.id) AS employee_count, AVG(e.salary) AS avg_salary "
                     "FROM departments d JOIN employees e ON d.id = e.department_id "
                     "GROUP BY d.id, d.department_name HAVING COUNT(e.id) > 2;",
            difficulty=Difficulty.PRO,
            points=50,
            hint="Use JOIN to connect tables, GROUP BY for aggregation, and HAVING to filter groups.",
        ),
        PracticeQuestion(
            id="pro_2",
            title="Window Function - Rank Employees",
            description="Write a SQL query to rank employees by salary within their department.\n\n"
                        "Table: employees",
            example_sql="-- Write your SQL query here\nSELECT first_name, last_name, salary, department_id,\n"
                        "       RANK() OVER (PARTITION BY department_id ORDER BY salary DESC) AS salary_rank\n"
                        "FROM employees;",
            solution="SELECT first_name, last_name, salary, department_id, "
                     "RANK() OVER (PARTITION BY department_id ORDER BY salary DESC) AS salary_rank FROM employees;",
            difficulty=Difficulty.PRO,
            points=50,
            hint="Use RANK() window function with PARTITION BY and ORDER BY clauses.",
        ),
        PracticeQuestion(
            id="pro_3",
            title="Self Join - Find Manager Hierarchy",
            description="Write a SQL query to find all employees and their managers.\n\n"
                        "Table: employees\n\nExpected output: employee name and their manager's name",
            example_sql="-- Write your SQL query here\n"
                        "SELECT CONCAT(e.first_name, ' ', e.last_name) AS employee_name,\n"
                        "       CONCAT(m.first_name, ' ', m.last_name) AS manager_name\n"
                        "FROM employees e\nLEFT JOIN employees m ON e.manager_id = m.id;",
            solution="SELECT CONCAT(e.first_name, ' ', e.last_name) AS employee_name, "
                     "CONCAT(m.first_name, ' ', m.last_name) AS manager_name "
                     "FROM employees e LEFT JOIN employees m ON e.manager_id = m.id;",
            difficulty=Difficulty.PRO,
            points=50,
            hint="Use self-join with LEFT JOIN to include employees without managers.",
        ),
        PracticeQuestion(
            id="pro_4",
            title="Running Total of Salaries",
            description="Write a SQL query to calculate running total of salaries ordered by employee ID.\n\n"
                        "Table: employees",
            example_sql="-- Write your SQL query here\nSELECT id, first_name, last_name, salary,\n"
                        "       SUM(salary) OVER (ORDER BY id) AS running_total\nFROM employees\nORDER BY id;",
            solution="SELECT id, first_name, last_name, salary, SUM(salary) OVER (ORDER BY id) AS running_total "
                     "FROM employees ORDER BY id;",
            difficulty=Difficulty.PRO,
            points=50,
            hint="Use SUM() window function with ORDER BY to calculate running total.",
        ),
    ]
