"""Problem statements published for the event."""

from __future__ import annotations

from .catalog import Domain, ProblemCatalog

DEFAULT_DOMAINS: tuple[Domain, ...] = (
    Domain(
        "Artificial Intelligence & Machine Learning",
        (
            "Build an AI system to detect plagiarism in academic submissions with explainable results",
            "Develop a chatbot for college student support (admissions, exams, placements)",
            "Create a model to predict student dropout risk using historical data",
            "Design an AI agent for resume screening and skill-gap analysis",
            "Build a fake news detection platform for regional languages",
            "AI agents for daily automation",
        ),
    ),
    Domain(
        "Sustainability & Green Tech",
        (
            "Smart waste segregation system using IoT + AI",
            "Carbon footprint tracker for individuals and institutions",
            "AI-based crop disease detection using mobile images",
            "Energy optimization system for smart campuses",
            "Water leakage detection and monitoring system",
        ),
    ),
    Domain(
        "Healthcare & BioTech",
        (
            "Remote patient monitoring dashboard using wearable data",
            "AI tool for early detection of diabetes/heart disease",
            "Hospital queue & appointment management system",
            "Mental health support chatbot for students",
            "Drug reminder & adherence mobile app",
        ),
    ),
    Domain(
        "Smart Cities & IoT",
        (
            "Smart traffic signal system to reduce congestion",
            "IoT-based streetlight automation for energy saving",
            "Smart parking solution with real-time availability",
            "Flood monitoring and early warning system",
            "Air quality monitoring and alert platform",
        ),
    ),
    Domain(
        "EdTech & Skill Development",
        (
            "Personalized learning platform using AI recommendations",
            "Virtual lab for engineering experiments",
            "LMS with analytics for faculty performance tracking",
            "Skill assessment & certification platform for colleges",
            "Peer-to-peer doubt solving app for students",
            "Tools improving campus life or student productivity",
        ),
    ),
    Domain(
        "FinTech & Blockchain",
        (
            "Expense tracker with AI-based financial insights",
            "Fraud detection system for online transactions",
            "Blockchain-based certificate verification system",
            "Digital wallet for campus transactions",
            "Credit scoring model for underserved users",
        ),
    ),
    Domain(
        "Cybersecurity",
        (
            "Phishing detection browser plugin",
            "Secure file sharing platform with encryption",
            "Intrusion detection dashboard for networks",
            "Password strength & breach alert system",
            "Cyber awareness training simulator",
        ),
    ),
    Domain(
        "AgriTech",
        (
            "Smart irrigation system using sensors and weather data",
            "Crop price prediction platform for farmers",
            "Marketplace app connecting farmers directly to buyers",
            "AI chatbot for farming advisory in local languages",
            "Soil health analysis tool",
        ),
    ),
    Domain(
        "Industry 4.0 & Automation",
        (
            "Predictive maintenance system for machinery",
            "Robotic process automation (RPA) for office workflows",
            "Digital twin for manufacturing units",
            "Supply chain optimization dashboard",
            "Quality inspection using computer vision",
        ),
    ),
    Domain(
        "Social Impact & Governance",
        (
            "Grievance redressal platform for citizens",
            "Missing person identification using AI",
            "Donation & NGO transparency platform",
            "Women safety app with real-time alerts",
            "Accessibility tool for visually/hearing impaired users",
            "Apps supporting local community needs",
        ),
    ),
    Domain(
        "AR/VR & Metaverse",
        (
            "VR-based campus tour for admissions",
            "AR learning app for engineering concepts",
            "Virtual job fair platform",
            "VR safety training for industries",
            "Metaverse collaboration space for teams",
        ),
    ),
    Domain(
        "Open Innovation / Student Choice",
        ("Any innovative solution addressing a real-world problem",),
    ),
)

DEFAULT_CATALOG = ProblemCatalog(DEFAULT_DOMAINS)
