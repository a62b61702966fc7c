# src/routers/election_data/models/election_models.py

from sqlalchemy import Column, Integer, String, Float, BigInteger, ForeignKey
from sqlalchemy.orm import relationship

from src.database.dbbase import Base


# -------------------------
#  State Table
# -------------------------
class State(Base):
    __tablename__ = "states"

    state_id = Column(Integer, primary_key=True, autoincrement=True)
    state_name = Column(String, unique=True, nullable=False)

    # Relationships
    districts = relationship("District", back_populates="state")


# -------------------------
#  District Table
# -------------------------
class District(Base):
    __tablename__ = "districts"

    district_id = Column(Integer, primary_key=True, autoincrement=True)
    district_name = Column(String, nullable=False)
    state_id = Column(Integer, ForeignKey("states.state_id"), nullable=False)

    # Relationships
    state = relationship("State", back_populates="districts")
    constituencies = relationship("AssemblyConstituency", back_populates="district")


# -------------------------
#  Assembly Constituency Table
# -------------------------
class AssemblyConstituency(Base):
    __tablename__ = "assembly_constituencies"

    ac_id = Column(Integer, primary_key=True, autoincrement=True)
    ac_name = Column(String, nullable=False)
    ac_number = Column(Integer)
    district_id = Column(Integer, ForeignKey("districts.district_id"), nullable=False)

    # Relationships
    district = relationship("District", back_populates="constituencies")
    booths = relationship("Booth", back_populates="constituency")

    def __repr__(self):
        return f"<AssemblyConstituency(ac_id={self.ac_id}, ac_name={self.ac_name})>"


# -------------------------
#  Booth Table
# -------------------------
class Booth(Base):
    __tablename__ = "booths"

    booth_id = Column(Integer, primary_key=True, autoincrement=True)
    booth_number = Column(String, nullable=False)  # text, but ordered numerically
    booth_name = Column(String)
    ac_id = Column(Integer, ForeignKey("assembly_constituencies.ac_id"), nullable=False)

    # Relationships
    constituency = relationship("AssemblyConstituency", back_populates="booths")
    turnout = relationship("BoothTurnout", back_populates="booth")
    results = relationship("BoothResult", back_populates="booth")


# -------------------------
#  Election Table
# -------------------------
class Election(Base):
    __tablename__ = "elections"

    election_id = Column(Integer, primary_key=True, autoincrement=True)
    election_year = Column(Integer, nullable=False)


# -------------------------
#  Booth Turnout Table (one row per booth and election)
# -------------------------
class BoothTurnout(Base):
    __tablename__ = "booth_turnout"

    turnout_id = Column(Integer, primary_key=True, autoincrement=True)
    booth_id = Column(Integer, ForeignKey("booths.booth_id"), nullable=False)
    election_id = Column(Integer, ForeignKey("elections.election_id"), nullable=False)
    total_electors = Column(BigInteger)
    male_voters = Column(BigInteger)
    female_voters = Column(BigInteger)
    other_voters = Column(BigInteger)
    total_votes_cast = Column(BigInteger)

    # Relationships
    booth = relationship("Booth", back_populates="turnout")


# -------------------------
#  Booth Result Table (one row per contesting candidate)
# -------------------------
class BoothResult(Base):
    __tablename__ = "booth_results"

    result_id = Column(Integer, primary_key=True, autoincrement=True)
    booth_id = Column(Integer, ForeignKey("booths.booth_id"), nullable=False)
    candidate_id = Column(Integer, ForeignKey("candidates.candidate_id"), nullable=False)
    election_id = Column(Integer, ForeignKey("elections.election_id"), nullable=False)
    votes_secured = Column(BigInteger)

    # Relationships
    booth = relationship("Booth", back_populates="results")
    candidate = relationship("Candidate", back_populates="results")


# -------------------------
#  Party Table
# -------------------------
class Party(Base):
    __tablename__ = "parties"

    party_id = Column(Integer, primary_key=True, autoincrement=True)
    party_name = Column(String, nullable=False)
    party_symbol = Column(String)
    party_color = Column(String)

    # Relationships
    candidates = relationship("Candidate", back_populates="party")


# -------------------------
#  Candidate Table
# -------------------------
class Candidate(Base):
    __tablename__ = "candidates"

    candidate_id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_name = Column(String)
    party_id = Column(Integer, ForeignKey("parties.party_id"))
    age = Column(Float)
    gender = Column(String)
    education = Column(String)
    criminal_cases = Column(Integer)
    assets = Column(BigInteger)
    liabilities = Column(BigInteger)

    # Relationships
    party = relationship("Party", back_populates="candidates")
    results = relationship("BoothResult", back_populates="candidate")
