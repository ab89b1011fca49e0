"""
Greeting payload records.

The /greet/{id} route answers with a GreetResponse, rendered as JSON or
XML depending on the request's Accept header:

    JSON:  {"Student":{"Nama":"Firaz","Npm":"2306217481"},"Greeter":"Budi"}

    XML:   <GreetResponse><Student><Nama>Firaz</Nama><Npm>2306217481</Npm>
           </Student><Greeter>Budi</Greeter></GreetResponse>

Field names on the wire are capitalized; the Python attributes are not.
"""

import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    nama: str
    npm: str

    def to_dict(self) -> dict:
        return {"Nama": self.nama, "Npm": self.npm}


@dataclass(frozen=True)
class GreetResponse:
    """A student identity plus the name of whoever is greeting them."""

    student: Student
    greeter: str

    def to_dict(self) -> dict:
        return {"Student": self.student.to_dict(), "Greeter": self.greeter}

    def to_json(self) -> str:
        """Compact JSON, keys in declaration order."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    def to_xml(self) -> str:
        root = ET.Element("GreetResponse")
        student = ET.SubElement(root, "Student")
        ET.SubElement(student, "Nama").text = self.student.nama
        ET.SubElement(student, "Npm").text = self.student.npm
        ET.SubElement(root, "Greeter").text = self.greeter
        return ET.tostring(root, encoding="unicode")

    @classmethod
    def from_json(cls, text: str) -> "GreetResponse":
        """
        Parse the JSON form.

        Raises:
            ValueError: If the text is not JSON or lacks the expected keys.
        """
        try:
            data = json.loads(text)
            student = data["Student"]
            return cls(
                student=Student(nama=student["Nama"], npm=student["Npm"]),
                greeter=data["Greeter"],
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid greeting payload: {e}") from e

    @classmethod
    def from_xml(cls, text: str) -> "GreetResponse":
        """
        Parse the XML form.

        Raises:
            ValueError: If the text is not well-formed or lacks elements.
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise ValueError(f"Invalid greeting payload: {e}") from e

        nama = root.findtext("Student/Nama")
        npm = root.findtext("Student/Npm")
        greeter = root.findtext("Greeter")
        if root.tag != "GreetResponse" or nama is None or npm is None or greeter is None:
            raise ValueError("Invalid greeting payload: missing elements")

        return cls(student=Student(nama=nama, npm=npm), greeter=greeter)
